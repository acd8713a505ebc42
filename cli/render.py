"""CLI: Render an expression document to source text or a rule record."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

from app.compiler.compiler import compile_expression
from app.compiler.interchange import expression_from_dict, rule_to_json
from app.compiler.rules import build_rule_expression
from app.compiler.validator import validate_expression
from app.core.config import settings
from app.core.errors import ExpressionRulesError
from app.core.observability import configure_structured_logging, get_logger

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile an expression tree (JSON) to canonical source text"
    )
    parser.add_argument(
        "path", nargs="?", default="-", help="Expression JSON file ('-' reads stdin)"
    )
    parser.add_argument("--rule-id", help="Emit a rule record with this id instead of source")
    parser.add_argument("--priority", type=int, default=0, help="Rule priority (with --rule-id)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print the rule record")
    parser.add_argument(
        "--validate", action="store_true", help="Validate types and arity before compiling"
    )
    return parser


def _load_document(path: str) -> object:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_structured_logging(
        settings.app_log_level, structured=settings.observability_structured_logs
    )

    try:
        document = _load_document(args.path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        print(f"error: cannot read {args.path}: {e}", file=sys.stderr)
        return 1

    try:
        tree = expression_from_dict(document)
        if args.validate:
            validate_expression(tree)
        if args.rule_id is not None:
            rule = build_rule_expression(tree, id=args.rule_id, priority=args.priority)
            print(rule_to_json(rule, pretty=args.pretty))
        else:
            print(compile_expression(tree))
    except ExpressionRulesError as e:
        logger.error("Render failed: %s", e.message, extra={"details": e.details})
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
