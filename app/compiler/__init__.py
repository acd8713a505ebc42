"""
Source compiler for typed expression trees.

This package turns expression trees into canonical source text and
assembles rule records around them.

Key Components:
- compiler: Recursive source generation
- rules: RuleExpression assembly
- validator: Arity, type and size checks for incoming trees
- interchange: Structured (JSON) encoding of trees and rules
- canonicalizer: Ensures deterministic JSON output

Design Principles:
- Determinism: Same tree produces identical source text
- Purity: No evaluation, no I/O, no mutation of input trees
"""

from app.compiler.canonicalizer import canonicalize_json
from app.compiler.compiler import compile_expression
from app.compiler.interchange import expression_from_dict, expression_to_dict
from app.compiler.rules import build_rule_expression
from app.compiler.validator import validate_expression

__all__ = [
    "build_rule_expression",
    "canonicalize_json",
    "compile_expression",
    "expression_from_dict",
    "expression_to_dict",
    "validate_expression",
]
