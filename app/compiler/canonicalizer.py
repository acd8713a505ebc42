"""
JSON Canonicalization for deterministic interchange output.

Ensures that a serialized expression tree or rule record is byte-for-byte
identical for the same input by enforcing consistent key ordering.

This matters for:
- Storage (content-based diffing of stored rules)
- Hashing (cache keys derived from a tree)
"""

import json
from typing import Any


def canonicalize_json(obj: Any) -> dict | list | Any:
    """
    Produce a deterministic, canonical representation of a JSON object.

    Dictionary keys are sorted at every level. List order is preserved, since
    argument and operand order is meaningful.

    Example:
        >>> canonicalize_json({"type": "variable", "return": "number", "name": "price"})
        {'name': 'price', 'return': 'number', 'type': 'variable'}
    """
    if isinstance(obj, dict):
        return {k: canonicalize_json(v) for k, v in sorted(obj.items())}

    elif isinstance(obj, (list, tuple)):
        return [canonicalize_json(item) for item in obj]

    else:
        # Primitives (str, int, float, bool, None) pass through unchanged
        return obj


def to_canonical_json_string(obj: Any) -> str:
    """
    Convert a Python object to a compact canonical JSON string.

    Example:
        >>> to_canonical_json_string({"type": "variable", "name": "x", "return": "number"})
        '{"name":"x","return":"number","type":"variable"}'
    """
    canonical = canonicalize_json(obj)
    return json.dumps(canonical, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def to_canonical_json_pretty(obj: Any) -> str:
    """Convert a Python object to a pretty-printed canonical JSON string."""
    canonical = canonicalize_json(obj)
    return json.dumps(canonical, sort_keys=True, indent=2, ensure_ascii=False)
