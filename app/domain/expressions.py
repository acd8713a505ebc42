"""
Typed expression model.

An expression tree is built from four frozen node models discriminated on
their ``type`` field. Nodes are never mutated: editing a tree means building
new nodes and splicing them into a fresh ancestor path (see app.domain.tree).

The declared result type is stored as ``return_type`` and serialized under
the key ``return``, which is the structured interchange encoding:

    {"type": "operation", "operator": "+", "return": "number",
     "operands": [{"type": "variable", "name": "price", "return": "number"},
                  {"type": "literal", "value": 10, "return": "number"}]}
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any
from typing import Literal as LiteralType

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from app.core.errors import TypeMismatchError, ValidationError
from app.domain.enums import DataType, OperationOperator
from app.domain.operators import resolve_operator

LiteralScalar = StrictBool | StrictInt | StrictFloat | StrictStr


class _ExpressionNode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    return_type: DataType = Field(alias="return")


class FunctionCall(_ExpressionNode):
    """Named invocation; arity is unconstrained."""

    type: LiteralType["function"] = "function"
    name: str
    args: tuple[Expression, ...] = ()


class Operation(_ExpressionNode):
    """Applies one operator to its operands. The return type follows the operator family."""

    type: LiteralType["operation"] = "operation"
    operator: OperationOperator
    operands: tuple[Expression, ...] = ()

    @field_validator("operator", mode="before")
    @classmethod
    def parse_operator(cls, v: Any) -> OperationOperator:
        return resolve_operator(v)

    @model_validator(mode="after")
    def validate_return_type(self) -> Operation:
        expected = self.operator.result_type
        if self.return_type is not expected:
            raise TypeMismatchError(
                f"Operator '{self.operator.value}' returns {expected.value}, "
                f"not {self.return_type.value}",
                details={
                    "operator": self.operator.value,
                    "expected": expected.value,
                    "actual": self.return_type.value,
                },
            )
        return self


class Literal(_ExpressionNode):
    """Constant value whose runtime type matches the declared return type."""

    type: LiteralType["literal"] = "literal"
    value: LiteralScalar

    @model_validator(mode="after")
    def validate_value_type(self) -> Literal:
        actual = data_type_of(self.value)
        if actual is not self.return_type:
            raise TypeMismatchError(
                f"Literal {self.value!r} is {actual.value}, declared {self.return_type.value}",
                details={
                    "value": self.value,
                    "expected": self.return_type.value,
                    "actual": actual.value,
                },
            )
        return self


class Variable(_ExpressionNode):
    """Named, unbound reference resolved by the consuming rule engine."""

    type: LiteralType["variable"] = "variable"
    name: str


Expression = Annotated[
    FunctionCall | Operation | Literal | Variable,
    Field(discriminator="type"),
]

FunctionCall.model_rebuild()
Operation.model_rebuild()


class RuleExpression(BaseModel):
    """
    Named, prioritized wrapper binding a root expression to its source text.

    ``source`` is derived from ``tree``; build instances with
    app.compiler.rules.build_rule_expression so the two never diverge.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    priority: StrictInt | StrictFloat
    source: str
    tree: Expression


def data_type_of(value: Any) -> DataType:
    """
    Map a Python scalar to its DataType.

    ``bool`` is checked first because it is a subclass of ``int``.

    Raises:
        TypeMismatchError: If the value is not a bool, int, float or str
    """
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if isinstance(value, (int, float)):
        return DataType.NUMBER
    if isinstance(value, str):
        return DataType.STRING
    raise TypeMismatchError(
        f"Unsupported literal value type: {type(value).__name__}",
        details={"value_type": type(value).__name__},
    )


def _build(model: type[BaseModel], **fields: Any) -> Any:
    try:
        return model(**fields)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid {model.__name__} node",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def _resolve_data_type(return_type: DataType | str) -> DataType:
    if isinstance(return_type, DataType):
        return return_type
    try:
        return DataType(return_type)
    except ValueError:
        raise ValidationError(
            f"Unknown data type: {return_type!r}",
            details={"data_type": return_type, "allowed": [t.value for t in DataType]},
        ) from None


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def make_literal(value: bool | int | float | str, return_type: DataType | str) -> Literal:
    """
    Build a literal node.

    Raises:
        TypeMismatchError: If ``value`` is not a scalar or does not have the declared type
    """
    data_type_of(value)
    return _build(Literal, value=value, return_type=_resolve_data_type(return_type))


def make_variable(name: str, return_type: DataType | str) -> Variable:
    return _build(Variable, name=name, return_type=_resolve_data_type(return_type))


def make_function_call(
    name: str, args: Sequence[Expression], return_type: DataType | str
) -> FunctionCall:
    return _build(
        FunctionCall, name=name, args=tuple(args), return_type=_resolve_data_type(return_type)
    )


def make_operation(operator: OperationOperator | str, operands: Sequence[Expression]) -> Operation:
    """
    Build an operation node, deriving its return type from the operator family.

    Operand count is not checked here so that callers can hold partially
    edited trees; the compiler rejects arity mismatches.

    Raises:
        UnknownOperatorError: If ``operator`` is not a recognized symbol
    """
    op = resolve_operator(operator)
    return _build(Operation, operator=op, operands=tuple(operands), return_type=op.result_type)
