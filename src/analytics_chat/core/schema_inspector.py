"""
Schema inspection for flattened result rows.

Derives the usable column set, the numeric subset, and each column's
semantic type. get_column_type is the single source of truth for all
type-specific behavior downstream (axis choice, sorting, formatting).
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from analytics_chat.core.field_types import ColumnMetadata, SemanticType
from analytics_chat.core.type_aliases import FlattenedRow
from analytics_chat.core.values import distinct_key, is_finite_number, is_scalar

__all__ = [
    "get_columns",
    "get_numeric_fields",
    "get_column_type",
    "distinct_count",
    "format_field_name",
    "table_header_label",
]

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def get_columns(rows: Sequence[FlattenedRow]) -> list[str]:
    """
    Get displayable columns in first-seen key order.

    A key qualifies only if its value is scalar in every row that has it.
    With more than one row, columns holding the same value in every row are
    dropped as constant metadata. A single row keeps every scalar column.

    Args:
        rows: Flattened rows

    Returns:
        Ordered list of column names
    """
    seen: dict[str, bool] = {}
    for row in rows:
        for key, value in row.items():
            scalar = is_scalar(value)
            seen[key] = seen.get(key, True) and scalar

    columns = [key for key, scalar in seen.items() if scalar]

    if len(rows) > 1:
        first = rows[0]
        columns = [
            column
            for column in columns
            if any(distinct_key(row.get(column)) != distinct_key(first.get(column)) for row in rows)
        ]

    return columns


def get_numeric_fields(rows: Sequence[FlattenedRow], columns: Sequence[str] | None = None) -> list[str]:
    """
    Get columns whose every value is null/missing or a finite number.

    Args:
        rows: Flattened rows
        columns: Precomputed get_columns(rows), if available

    Returns:
        Numeric columns in column order
    """
    if not rows:
        return []

    fields = get_columns(rows) if columns is None else columns
    return [
        field
        for field in fields
        if all(row.get(field) is None or is_finite_number(row.get(field)) for row in rows)
    ]


def get_column_type(column_name: str, metadata: Sequence[ColumnMetadata] | None = None) -> SemanticType:
    """Exact-name metadata lookup; TEXT when absent."""
    if not metadata:
        return SemanticType.TEXT
    for column in metadata:
        if column.name == column_name:
            return column.type
    return SemanticType.TEXT


def distinct_count(rows: Sequence[FlattenedRow], field: str) -> int:
    """Count distinct values of a field, missing values counting as null."""
    return len({distinct_key(row.get(field)) for row in rows})


def format_field_name(field_name: str) -> str:
    """
    Convert a field name to Title Case words for display.

    Examples:
        >>> format_field_name("group.dept_name")
        'Group Dept Name'
        >>> format_field_name("totalSpend")
        'Total Spend'
    """
    spaced = field_name.replace("_", " ").replace(".", " ")
    spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", spaced)
    return " ".join(word[:1].upper() + word[1:].lower() for word in spaced.split(" "))


def table_header_label(column: str) -> str:
    """Table header text: drop `group.` prefixes, underscores to spaces, capitalize words."""
    text = column.replace("group.", "").replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))
