"""
Pytest configuration and shared fixtures.

Provides:
- Import path setup for the app and cli packages
- Sample expression trees used across test modules
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Add app to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)

from app.domain.expressions import (  # noqa: E402 (import after path setup)
    FunctionCall,
    Operation,
    make_function_call,
    make_literal,
    make_operation,
    make_variable,
)


@pytest.fixture
def price_plus_ten() -> Operation:
    """(price + 10)"""
    return make_operation("+", [make_variable("price", "number"), make_literal(10, "number")])


@pytest.fixture
def avg_call(price_plus_ten: Operation) -> FunctionCall:
    """avg((price + 10), "x")"""
    return make_function_call("avg", [price_plus_ten, make_literal("x", "string")], "number")


@pytest.fixture
def flags_condition() -> Operation:
    """((is_vip or is_new) and True)"""
    return make_operation(
        "and",
        [
            make_operation(
                "or", [make_variable("is_vip", "boolean"), make_variable("is_new", "boolean")]
            ),
            make_literal(True, "boolean"),
        ],
    )
