"""
Persistent tree editing.

Trees are immutable: every edit returns a new root that shares untouched
subtrees with the old one. A path is a sequence of child indices; index ``i``
addresses ``args[i]`` of a function call or ``operands[i]`` of an operation.
The empty path addresses the root.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from app.core.errors import InvalidPathError
from app.domain.enums import OperationOperator
from app.domain.expressions import Expression, FunctionCall, Operation
from app.domain.operators import resolve_operator

Path = tuple[int, ...]


def children_of(node: Expression) -> tuple[Expression, ...]:
    if isinstance(node, FunctionCall):
        return node.args
    if isinstance(node, Operation):
        return node.operands
    return ()


def _with_children(node: Expression, children: Sequence[Expression]) -> Expression:
    if isinstance(node, FunctionCall):
        return node.model_copy(update={"args": tuple(children)})
    if isinstance(node, Operation):
        return node.model_copy(update={"operands": tuple(children)})
    raise InvalidPathError(
        f"{node.type} node has no children", details={"node_type": node.type}
    )


def _child_at(node: Expression, index: int, path: Sequence[int]) -> Expression:
    children = children_of(node)
    if not 0 <= index < len(children):
        raise InvalidPathError(
            f"No child at index {index} of {node.type} node",
            details={"path": list(path), "index": index, "child_count": len(children)},
        )
    return children[index]


def get_subtree(root: Expression, path: Sequence[int]) -> Expression:
    """
    Return the node addressed by ``path``.

    Raises:
        InvalidPathError: If an index is out of range or descends into a leaf
    """
    node = root
    for index in path:
        node = _child_at(node, index, path)
    return node


def replace_subtree(root: Expression, path: Sequence[int], new_node: Expression) -> Expression:
    """
    Return a new tree with the node at ``path`` replaced by ``new_node``.

    Only the ancestors on ``path`` are rebuilt; ``root`` is left untouched.

    Raises:
        InvalidPathError: If ``path`` does not address a node
    """
    if not path:
        return new_node
    head, rest = path[0], path[1:]
    child = _child_at(root, head, path)
    children = list(children_of(root))
    children[head] = replace_subtree(child, rest, new_node)
    return _with_children(root, children)


def remove_child(root: Expression, path: Sequence[int]) -> Expression:
    """
    Return a new tree with the node at ``path`` dropped from its parent's children.

    Raises:
        InvalidPathError: If ``path`` is empty or does not address a node
    """
    if not path:
        raise InvalidPathError("Cannot remove the root node", details={"path": []})
    parent_path, index = path[:-1], path[-1]
    parent = get_subtree(root, parent_path)
    _child_at(parent, index, path)
    children = [c for i, c in enumerate(children_of(parent)) if i != index]
    return replace_subtree(root, parent_path, _with_children(parent, children))


def with_operator(node: Operation, operator: OperationOperator | str) -> Operation:
    """
    Rebuild an operation with a different operator.

    Switching to the unary operator keeps only the first operand. Switching
    to a binary operator keeps the operands as they are; a second operand has
    to be supplied before the tree compiles. The return type is re-derived.
    """
    op = resolve_operator(operator)
    operands = node.operands[:1] if op.arity == 1 else node.operands
    return Operation(operator=op, operands=operands, return_type=op.result_type)


def walk(root: Expression, path: Path = ()) -> Iterator[tuple[Path, Expression]]:
    """Yield ``(path, node)`` pairs in depth-first pre-order."""
    yield path, root
    for i, child in enumerate(children_of(root)):
        yield from walk(child, (*path, i))
