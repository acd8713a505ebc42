"""
Tests for persistent tree editing.

Edits always return a new root and leave the original tree untouched.
"""

import pytest

from app.compiler.compiler import compile_expression
from app.core.errors import ArityMismatchError, InvalidPathError, UnknownOperatorError
from app.domain.enums import DataType, OperationOperator
from app.domain.expressions import make_literal, make_operation, make_variable
from app.domain.tree import (
    children_of,
    get_subtree,
    remove_child,
    replace_subtree,
    walk,
    with_operator,
)


class TestGetSubtree:
    """Test path lookup."""

    def test_empty_path_is_root(self, avg_call):
        assert get_subtree(avg_call, ()) is avg_call

    def test_nested_path(self, avg_call):
        node = get_subtree(avg_call, (0, 1))
        assert node == make_literal(10, "number")

    def test_index_out_of_range(self, avg_call):
        with pytest.raises(InvalidPathError) as exc_info:
            get_subtree(avg_call, (5,))

        assert exc_info.value.details["child_count"] == 2

    def test_descending_into_leaf(self, avg_call):
        with pytest.raises(InvalidPathError):
            get_subtree(avg_call, (1, 0))

    def test_leaf_has_no_children(self):
        assert children_of(make_variable("x", "number")) == ()


class TestReplaceSubtree:
    """Test replace-in-place by path copying."""

    def test_replace_nested_node(self, avg_call):
        updated = replace_subtree(avg_call, (0, 1), make_literal(20, "number"))

        assert compile_expression(updated) == 'avg((price + 20), "x")'
        assert compile_expression(avg_call) == 'avg((price + 10), "x")'

    def test_untouched_siblings_are_shared(self, avg_call):
        updated = replace_subtree(avg_call, (0, 1), make_literal(20, "number"))
        assert updated.args[1] is avg_call.args[1]

    def test_replace_root(self, avg_call, flags_condition):
        assert replace_subtree(avg_call, (), flags_condition) is flags_condition

    def test_invalid_path(self, avg_call):
        with pytest.raises(InvalidPathError):
            replace_subtree(avg_call, (0, 2), make_literal(1, "number"))


class TestRemoveChild:
    """Test child removal."""

    def test_remove_function_argument(self, avg_call):
        updated = remove_child(avg_call, (1,))

        assert compile_expression(updated) == "avg((price + 10))"
        assert len(avg_call.args) == 2

    def test_remove_operand_breaks_arity(self, price_plus_ten):
        updated = remove_child(price_plus_ten, (0,))

        assert updated.operands == (make_literal(10, "number"),)
        with pytest.raises(ArityMismatchError):
            compile_expression(updated)

    def test_cannot_remove_root(self, avg_call):
        with pytest.raises(InvalidPathError):
            remove_child(avg_call, ())

    def test_missing_child(self, avg_call):
        with pytest.raises(InvalidPathError):
            remove_child(avg_call, (3,))


class TestWithOperator:
    """Test operator changes on an operation node."""

    def test_binary_to_binary(self, price_plus_ten):
        updated = with_operator(price_plus_ten, "*")

        assert updated.operator is OperationOperator.MULTIPLY
        assert compile_expression(updated) == "(price * 10)"

    def test_binary_to_unary_keeps_first_operand(self, price_plus_ten):
        updated = with_operator(price_plus_ten, "-")
        assert compile_expression(updated) == "(-price)"

    def test_family_change_rederives_return_type(self, price_plus_ten):
        updated = with_operator(price_plus_ten, ">=")
        assert updated.return_type is DataType.BOOLEAN

    def test_unary_to_binary_needs_second_operand(self):
        negated = make_operation("-", [make_variable("x", "number")])

        updated = with_operator(negated, "+")

        with pytest.raises(ArityMismatchError):
            compile_expression(updated)

    def test_unknown_operator(self, price_plus_ten):
        with pytest.raises(UnknownOperatorError):
            with_operator(price_plus_ten, "%")


class TestWalk:
    """Test depth-first traversal."""

    def test_pre_order_paths(self, avg_call):
        paths = [path for path, _ in walk(avg_call)]
        assert paths == [(), (0,), (0, 0), (0, 1), (1,)]

    def test_nodes_match_paths(self, flags_condition):
        for path, node in walk(flags_condition):
            assert get_subtree(flags_condition, path) is node
