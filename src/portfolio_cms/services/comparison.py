"""Structural equality for JSON-like field values.

Draft and published values come back from the store as freshly decoded JSON,
so identity never matches and serialized text depends on key order. Values
are compared by structure instead:

- mappings: same key set, each value structurally equal (key order ignored)
- sequences: same length, element-wise equal in order
- booleans only equal booleans (``True`` is not ``1``)
- numbers compare numerically (``1 == 1.0``)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from numbers import Number
from typing import Any


def structurally_equal(left: Any, right: Any) -> bool:
    """Return True if two JSON-like values have the same structure and content."""
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, Number) and isinstance(right, Number):
        return left == right

    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(structurally_equal(left[key], right[key]) for key in left)

    if isinstance(left, Sequence) and isinstance(right, Sequence):
        if len(left) != len(right):
            return False
        return all(structurally_equal(a, b) for a, b in zip(left, right, strict=True))

    return left == right


def changed_fields(draft: Mapping[str, Any], baseline: Mapping[str, Any]) -> list[str]:
    """Return the names of fields in ``draft`` whose value differs from ``baseline``."""
    return [
        name
        for name, value in draft.items()
        if not structurally_equal(value, baseline.get(name))
    ]
