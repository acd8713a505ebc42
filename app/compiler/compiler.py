"""
Source compiler for expression trees.

Renders any well-formed expression tree to canonical source text:

    avg((price + 10), "x")

Rendering is purely structural. It never evaluates anything and never
consults a node's declared return type. Same tree in, same text out.
"""

import time
from decimal import Decimal

from app.core.config import settings
from app.core.errors import ArityMismatchError, InvalidExpressionError
from app.core.observability import get_logger, metrics
from app.domain.expressions import Expression, FunctionCall, Literal, Operation, Variable

logger = get_logger(__name__)


def compile_expression(expression: Expression) -> str:
    """
    Compile an expression tree into canonical source text.

    Args:
        expression: Root of the tree to render

    Returns:
        Source text for the tree

    Raises:
        ArityMismatchError: If an operation's operand count disagrees with its operator
        InvalidExpressionError: If a node is not one of the four expression variants

    Example:
        >>> compile_expression(make_operation("-", [make_literal(5, "number")]))
        '(-5)'
    """
    start_time = time.perf_counter()
    try:
        source = _render(expression, "$")
    except Exception:
        _record_compiler_metrics("error", time.perf_counter() - start_time)
        raise

    duration = time.perf_counter() - start_time
    _record_compiler_metrics("success", duration)
    logger.debug("Compiled expression to %d chars in %.6fs", len(source), duration)
    return source


def _record_compiler_metrics(status: str, duration: float) -> None:
    if not settings.metrics_enabled:
        return

    metrics.expression_compilations_total.labels(status=status).inc()
    metrics.expression_compile_duration_seconds.observe(duration)


def _render(node: Expression, path: str) -> str:
    if isinstance(node, FunctionCall):
        args = [_render(arg, f"{path}.args[{i}]") for i, arg in enumerate(node.args)]
        return f"{node.name}({', '.join(args)})"

    if isinstance(node, Literal):
        return _render_literal(node)

    if isinstance(node, Operation):
        return _render_operation(node, path)

    if isinstance(node, Variable):
        return node.name

    raise InvalidExpressionError(
        f"Invalid expression at {path}: {type(node).__name__}",
        details={"path": path, "node_type": type(node).__name__},
    )


def _render_literal(node: Literal) -> str:
    value = node.value

    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return "True" if value else "False"

    if isinstance(value, str):
        # Embedded quotes are not escaped
        return f'"{value}"'

    return format_number(value)


def _render_operation(node: Operation, path: str) -> str:
    operator = node.operator
    # Operands beyond the second are ignored
    considered = node.operands[:2]

    if len(considered) != operator.arity:
        raise ArityMismatchError(
            f"Operator '{operator.value}' requires {operator.arity} "
            f"operand{'s' if operator.arity > 1 else ''} at {path}, got {len(node.operands)}",
            details={
                "path": path,
                "operator": operator.value,
                "expected_arity": operator.arity,
                "actual_operands": len(node.operands),
            },
        )

    operands = [_render(operand, f"{path}.operands[{i}]") for i, operand in enumerate(considered)]

    if operator.arity == 1:
        return f"({operator.value}{operands[0]})"
    return f"({operands[0]} {operator.value} {operands[1]})"


def format_number(value: int | float) -> str:
    """
    Render a number in its shortest round-tripping decimal form.

    Integral floats drop their fractional part, and exponent notation is only
    used outside ``1e-7 < |value| < 1e21`` (``1e-7``, ``1e+21``).
    """
    if isinstance(value, int):
        return str(value)
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    text = repr(value)
    mantissa, sep, exponent_text = text.partition("e")
    if not sep:
        return text[:-2] if text.endswith(".0") else text

    exponent = int(exponent_text)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"
