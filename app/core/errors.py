"""
Domain-specific exceptions for expression rules.

Every error carries a human readable message and a ``details`` dict with
enough context (path, operator, expected vs. actual values) to locate the
offending subtree.
"""

from typing import Any


class ExpressionRulesError(Exception):
    """Base exception for all expression rule errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ExpressionRulesError):
    """
    Raised when input data fails validation.

    Examples:
    - Malformed interchange document
    - Tree exceeds depth or node limits
    - Stored rule source that disagrees with its tree
    """

    pass


class CompilationError(ExpressionRulesError):
    """
    Raised when source generation fails.

    Examples:
    - Operand count that disagrees with the operator arity
    - Node that is not one of the recognized variants
    """

    pass


class UnknownOperatorError(ValidationError):
    """
    Raised when an operator symbol is not one of the recognized operators.

    Examples:
    - ``"%"`` passed to ``make_operation``
    - ``"&&"`` passed to ``is_boolean``
    """

    pass


class TypeMismatchError(ValidationError):
    """
    Raised when a value or operand does not match its declared data type.

    Examples:
    - ``make_literal("10", DataType.NUMBER)``
    - String operand under an arithmetic operator
    """

    pass


class InvalidPathError(ValidationError):
    """Raised when a child path does not address a node in the tree."""

    pass


class ArityMismatchError(CompilationError):
    """
    Raised when an operation's operand count disagrees with its operator.

    Examples:
    - ``-`` with two operands
    - ``+`` with a single operand
    """

    pass


class InvalidExpressionError(CompilationError):
    """Raised when a node outside the four expression variants reaches the compiler."""

    pass
