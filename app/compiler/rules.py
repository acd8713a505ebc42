"""
Rule assembly.

A RuleExpression pairs a root expression with its precomputed source text.
The source is always produced here from the tree, so a rule is rebuilt
whenever its tree changes rather than updated in place.
"""

import pydantic

from app.compiler.compiler import compile_expression
from app.core.config import settings
from app.core.errors import ValidationError
from app.core.observability import get_logger, metrics
from app.domain.expressions import Expression, RuleExpression

logger = get_logger(__name__)


def build_rule_expression(tree: Expression, *, id: str, priority: int | float) -> RuleExpression:
    """
    Assemble a rule record around an expression tree.

    ``id`` and ``priority`` are passed through untouched; uniqueness and
    priority scheduling belong to the rule engine that consumes the record.

    Args:
        tree: Root expression
        id: Caller-supplied rule identifier
        priority: Caller-supplied priority, integral or fractional

    Returns:
        RuleExpression whose ``source`` equals ``compile_expression(tree)``

    Raises:
        CompilationError: If the tree cannot be compiled
        ValidationError: If ``id`` is not a string or ``priority`` is not a number
    """
    source = compile_expression(tree)
    try:
        rule = RuleExpression(id=id, priority=priority, source=source, tree=tree)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid rule expression",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    if settings.metrics_enabled:
        metrics.rule_expressions_built_total.inc()
    logger.info("Built rule expression %s (priority=%s)", id, priority)
    return rule


def rebuild_rule_expression(rule: RuleExpression, tree: Expression) -> RuleExpression:
    """Return a copy of ``rule`` bound to a new tree, with its source recompiled."""
    return build_rule_expression(tree, id=rule.id, priority=rule.priority)
