"""
Structured interchange encoding for expression trees and rule records.

The encoding mirrors the node models field for field, with the declared
result type under ``return``. Canonical JSON text is produced with sorted
keys so the same tree always serializes to the same bytes.
"""

from typing import Any

import pydantic
from pydantic import TypeAdapter

from app.compiler.canonicalizer import (
    canonicalize_json,
    to_canonical_json_pretty,
    to_canonical_json_string,
)
from app.compiler.compiler import compile_expression
from app.core.errors import ValidationError
from app.core.observability import get_logger
from app.domain.expressions import Expression, RuleExpression

logger = get_logger(__name__)

_expression_adapter: TypeAdapter[Expression] = TypeAdapter(Expression)


def expression_to_dict(expression: Expression) -> dict[str, Any]:
    return canonicalize_json(expression.model_dump(mode="json", by_alias=True))


def expression_from_dict(data: Any) -> Expression:
    """
    Decode an interchange document into an expression tree.

    Raises:
        ValidationError: If the document is not a well-formed tree
        UnknownOperatorError: If an operation names an unknown operator
        TypeMismatchError: If a literal or operation declares the wrong type
    """
    try:
        return _expression_adapter.validate_python(data)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid expression document",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def rule_to_dict(rule: RuleExpression) -> dict[str, Any]:
    return canonicalize_json(rule.model_dump(mode="json", by_alias=True))


def rule_from_dict(data: Any) -> RuleExpression:
    """
    Decode a stored rule record.

    The stored ``source`` must equal the compiled tree; a record whose cached
    source has drifted from its tree is rejected.

    Raises:
        ValidationError: If the document is malformed or its source is stale
    """
    try:
        rule = RuleExpression.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid rule expression document",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    expected = compile_expression(rule.tree)
    if rule.source != expected:
        logger.warning("Rule %s has a stale source", rule.id)
        raise ValidationError(
            f"Rule {rule.id} source does not match its tree",
            details={"rule_id": rule.id, "stored_source": rule.source, "compiled_source": expected},
        )
    return rule


def expression_to_json(expression: Expression, pretty: bool = False) -> str:
    data = expression_to_dict(expression)
    return to_canonical_json_pretty(data) if pretty else to_canonical_json_string(data)


def rule_to_json(rule: RuleExpression, pretty: bool = False) -> str:
    data = rule_to_dict(rule)
    return to_canonical_json_pretty(data) if pretty else to_canonical_json_string(data)
