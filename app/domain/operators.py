"""Operator classification queries."""

from app.core.errors import UnknownOperatorError
from app.domain.enums import OperationOperator, OperatorFamily


def resolve_operator(operator: OperationOperator | str) -> OperationOperator:
    """
    Resolve an operator symbol to its enum member.

    Args:
        operator: Enum member or its symbol (e.g. ``">="``, ``"and"``)

    Returns:
        The matching OperationOperator

    Raises:
        UnknownOperatorError: If the symbol is not a recognized operator
    """
    if isinstance(operator, OperationOperator):
        return operator
    try:
        return OperationOperator(operator)
    except ValueError:
        raise UnknownOperatorError(
            f"Unknown operator: {operator!r}",
            details={
                "operator": operator,
                "allowed_operators": [op.value for op in OperationOperator],
            },
        ) from None


def is_unary(operator: OperationOperator | str) -> bool:
    return resolve_operator(operator).arity == 1


def is_arithmetic(operator: OperationOperator | str) -> bool:
    return resolve_operator(operator).family is OperatorFamily.ARITHMETIC


def is_boolean(operator: OperationOperator | str) -> bool:
    return resolve_operator(operator).family is OperatorFamily.BOOLEAN
