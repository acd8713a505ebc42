"""
Expression Tree Validation.

Validates that expression trees are structurally and semantically sound
before they are compiled or stored:
- Operand counts match operator arity
- Literal values match their declared type
- Operand types match their operator family
- Tree size stays within configured limits

The compiler only enforces arity. This module is the stricter gate used by
callers that accept trees from outside (interchange documents, editors).
"""

from app.core.config import settings
from app.core.errors import ArityMismatchError, TypeMismatchError, ValidationError
from app.core.observability import get_logger
from app.core.validators import validate_expression_depth, validate_expression_node_count
from app.domain.enums import DataType, OperatorFamily
from app.domain.expressions import Expression, FunctionCall, Literal, Operation, data_type_of

logger = get_logger(__name__)


def validate_expression(
    expression: Expression,
    *,
    boolean_operands_strict: bool | None = None,
    max_depth: int | None = None,
    max_nodes: int | None = None,
) -> None:
    """
    Validate an expression tree.

    Args:
        expression: Root of the tree
        boolean_operands_strict: Require boolean-typed operands under
            comparison/logical operators (defaults to settings)
        max_depth: Maximum nesting depth (defaults to settings)
        max_nodes: Maximum node count (defaults to settings)

    Raises:
        ValidationError: If the tree exceeds size limits
        ArityMismatchError: If an operation has the wrong operand count
        TypeMismatchError: If a literal or operand has the wrong type

    Example:
        >>> price = make_variable("price", "number")
        >>> tree = make_operation(">", [price, make_literal(10, "number")])
        >>> validate_expression(tree, boolean_operands_strict=False)  # Passes
        >>> validate_expression(tree)  # Raises TypeMismatchError (strict by default)
    """
    if boolean_operands_strict is None:
        boolean_operands_strict = settings.expression_boolean_operands_strict
    if max_depth is None:
        max_depth = settings.expression_max_depth
    if max_nodes is None:
        max_nodes = settings.expression_max_nodes

    try:
        validate_expression_depth(expression, max_depth=max_depth)
        validate_expression_node_count(expression, max_nodes=max_nodes)
    except ValueError as e:
        raise ValidationError(
            str(e), details={"max_depth": max_depth, "max_nodes": max_nodes}
        ) from e

    _validate_node(expression, "$", boolean_operands_strict)


def _validate_node(node: Expression, path: str, boolean_operands_strict: bool) -> None:
    """
    Recursively validate a node and its children.

    Args:
        node: Current node
        path: JSONPath to the current node (for error reporting)
        boolean_operands_strict: See validate_expression
    """
    if isinstance(node, Literal):
        _validate_literal(node, path)
    elif isinstance(node, Operation):
        _validate_operation(node, path, boolean_operands_strict)
    elif isinstance(node, FunctionCall):
        for i, arg in enumerate(node.args):
            _validate_node(arg, f"{path}.args[{i}]", boolean_operands_strict)


def _validate_literal(node: Literal, path: str) -> None:
    # Literals built through model_construct skip model validation
    actual = data_type_of(node.value)
    if actual is not node.return_type:
        raise TypeMismatchError(
            f"Literal at {path} is {actual.value}, declared {node.return_type.value}",
            details={"path": path, "expected": node.return_type.value, "actual": actual.value},
        )


def _validate_operation(node: Operation, path: str, boolean_operands_strict: bool) -> None:
    operator = node.operator

    if len(node.operands) != operator.arity:
        raise ArityMismatchError(
            f"Operator '{operator.value}' requires {operator.arity} operand(s) at {path}, "
            f"got {len(node.operands)}",
            details={
                "path": path,
                "operator": operator.value,
                "expected_arity": operator.arity,
                "actual_operands": len(node.operands),
            },
        )

    if operator.family is OperatorFamily.ARITHMETIC:
        expected = DataType.NUMBER
    elif boolean_operands_strict:
        expected = DataType.BOOLEAN
    else:
        expected = None

    for i, operand in enumerate(node.operands):
        operand_path = f"{path}.operands[{i}]"
        if expected is not None and operand.return_type is not expected:
            raise TypeMismatchError(
                f"Operator '{operator.value}' expects {expected.value} operands, "
                f"got {operand.return_type.value} at {operand_path}",
                details={
                    "path": operand_path,
                    "operator": operator.value,
                    "expected": expected.value,
                    "actual": operand.return_type.value,
                },
            )
        _validate_node(operand, operand_path, boolean_operands_strict)
