"""Shared size validators for expression trees."""

from app.domain.expressions import Expression
from app.domain.tree import children_of


def validate_expression_depth(
    expression: Expression, max_depth: int = 32, current_depth: int = 0
) -> None:
    """
    Validate that an expression tree doesn't exceed maximum depth.

    Args:
        expression: Expression node
        max_depth: Maximum allowed depth (default: 32)
        current_depth: Current depth in recursion

    Raises:
        ValueError: If tree exceeds maximum depth
    """
    if current_depth > max_depth:
        raise ValueError(f"Expression tree exceeds maximum depth of {max_depth}")

    for child in children_of(expression):
        validate_expression_depth(child, max_depth, current_depth + 1)


def validate_expression_node_count(expression: Expression, max_nodes: int = 1000) -> None:
    """
    Validate that an expression tree doesn't exceed maximum node count.

    Counts every node: function calls, operations, literals and variables.

    Args:
        expression: Root expression node
        max_nodes: Maximum allowed nodes (default: 1000)

    Raises:
        ValueError: If tree exceeds maximum node count
    """

    def count_nodes(node: Expression) -> int:
        return 1 + sum(count_nodes(child) for child in children_of(node))

    node_count = count_nodes(expression)

    if node_count > max_nodes:
        raise ValueError(
            f"Expression tree exceeds maximum node count of {max_nodes} (got {node_count} nodes)"
        )
