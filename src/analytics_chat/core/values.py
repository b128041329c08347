"""
Value classification for JSON-like query results.

Result rows arrive from the chat backend as arbitrary decoded JSON. They are
normalized once at the boundary (normalize_rows) into a closed set of Python
types, and every downstream module dispatches on ValueKind instead of
re-testing runtime types.

Key functions:
- classify: Map a normalized value to its ValueKind
- normalize_rows: Boundary conversion of raw rows into plain dict/list/scalars
- distinct_key: Hashable identity used for cardinality and constancy checks
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from analytics_chat.core.type_aliases import ResultRow

__all__ = [
    "ValueKind",
    "classify",
    "is_scalar",
    "is_finite_number",
    "is_record_array",
    "distinct_key",
    "plain_text",
    "compare_values",
    "normalize_value",
    "normalize_rows",
]


class ValueKind(str, Enum):
    """Closed set of value shapes a result cell can take."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    TEXT = "text"
    ARRAY = "array"
    RECORD = "record"


_NAN_KEY = "NaN"


def classify(value: Any) -> ValueKind:
    """
    Classify a normalized value.

    bool is checked before int because bool subclasses int.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.RECORD
    return ValueKind.TEXT


def is_scalar(value: Any) -> bool:
    """True for null, boolean, number and text values."""
    return classify(value) not in (ValueKind.ARRAY, ValueKind.RECORD)


def is_finite_number(value: Any) -> bool:
    """True for numbers that are neither NaN nor infinite."""
    return classify(value) is ValueKind.NUMBER and math.isfinite(value)


def is_record_array(value: Any) -> bool:
    """True for a non-empty array whose first element is a record."""
    return classify(value) is ValueKind.ARRAY and len(value) > 0 and classify(value[0]) is ValueKind.RECORD


def distinct_key(value: Any) -> tuple[ValueKind, Any]:
    """
    Hashable identity for a scalar value.

    Keeps True distinct from 1 (Python treats them as equal) and collapses
    every NaN into a single key so NaN counts once.
    """
    kind = classify(value)
    if kind is ValueKind.NUMBER and math.isnan(value):
        return kind, _NAN_KEY
    if kind in (ValueKind.ARRAY, ValueKind.RECORD):
        return kind, id(value)
    return kind, value


def plain_text(value: Any) -> str:
    """
    Plain text form of a value, JSON-flavored.

    Booleans render as true/false and integral floats drop their ".0".
    """
    kind = classify(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            if value.is_integer():
                return str(int(value))
        return str(value)
    return str(value)


def _text_sort_key(value: Any) -> tuple[str, str]:
    text = plain_text(value)
    return text.casefold(), text


def compare_values(left: Any, right: Any) -> int:
    """
    Three-way comparison: numeric if both are numbers, else text.

    Text comparison is case-insensitive first, then case-sensitive as a
    tie-break, which keeps the ordering total.
    """
    if classify(left) is ValueKind.NUMBER and classify(right) is ValueKind.NUMBER:
        return (left > right) - (left < right)
    left_key, right_key = _text_sort_key(left), _text_sort_key(right)
    return (left_key > right_key) - (left_key < right_key)


def normalize_value(value: Any) -> Any:
    """
    Convert one decoded value into the closed value set.

    Args:
        value: Any value produced by a JSON decoder or a Python caller

    Returns:
        None, bool, int, float, str, list or dict (recursively normalized)
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(key): normalize_value(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(child) for child in value]
    return str(value)


def normalize_rows(rows: Any) -> list[ResultRow]:
    """
    Normalize a raw result payload into a list of rows.

    Non-mapping entries are dropped; a missing payload yields no rows.
    The input is never mutated.
    """
    if not rows:
        return []
    return [normalize_value(row) for row in rows if isinstance(row, Mapping)]
