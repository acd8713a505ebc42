"""
Domain enums for the expression model.

Operator classification (family and arity) is attached to the operator enum
as static facts, so it is derived from the symbol alone.
"""

from enum import Enum


class DataType(str, Enum):
    """Result type declared on every expression node."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"


class OperatorFamily(str, Enum):
    """The two disjoint operator families."""

    ARITHMETIC = "ARITHMETIC"  # number -> number
    BOOLEAN = "BOOLEAN"  # always yields boolean


class OperationOperator(str, Enum):
    """
    Recognized operation operators.

    Every operator belongs to exactly one family. Only MINUS is unary.
    """

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    EQ = "=="
    NE = "!="
    AND = "and"
    OR = "or"

    @property
    def family(self) -> OperatorFamily:
        if self in _ARITHMETIC_OPERATORS:
            return OperatorFamily.ARITHMETIC
        return OperatorFamily.BOOLEAN

    @property
    def arity(self) -> int:
        return 1 if self is OperationOperator.MINUS else 2

    @property
    def result_type(self) -> DataType:
        """Data type produced by an operation using this operator."""
        if self.family is OperatorFamily.ARITHMETIC:
            return DataType.NUMBER
        return DataType.BOOLEAN


_ARITHMETIC_OPERATORS = frozenset(
    {
        OperationOperator.PLUS,
        OperationOperator.MINUS,
        OperationOperator.MULTIPLY,
        OperationOperator.DIVIDE,
    }
)
