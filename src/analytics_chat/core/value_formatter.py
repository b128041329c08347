"""
Value Formatter - renders result values as display strings.

format_value is deterministic and never raises: missing values render as
"-", unexpected records as "[object]", and unparsable dates pass through.
Both the table (per cell) and the chart (per tick/tooltip) use it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from analytics_chat.core.field_types import ColumnMetadata, SemanticType
from analytics_chat.core.schema_inspector import get_column_type
from analytics_chat.core.values import ValueKind, classify, is_finite_number, plain_text

__all__ = ["MISSING_VALUE", "MONTH_ABBREVIATIONS", "format_value", "format_money", "format_date", "ordinal"]

MISSING_VALUE = "-"
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ISO_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def ordinal(n: int) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th, 23 -> 23rd."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _fixed(value: float, places: int, grouping: bool = False) -> str:
    # Ties round away from zero; Decimal(float) is exact so binary ties stay ties
    quantized = Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{quantized:,.{places}f}" if grouping else f"{quantized:.{places}f}"


def _grouped(value: float) -> str:
    # Up to 3 fraction digits, trailing zeros trimmed
    text = _fixed(value, 3, grouping=True).rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_money(value: float) -> str:
    """
    Dollar amount, sign preserved, scaled by magnitude.

    Examples:
        >>> format_money(1234567)
        '$1.23M'
        >>> format_money(-15300)
        '-$15.3K'
        >>> format_money(950.5)
        '$950.50'
    """
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1_000_000_000:
        body = f"{_fixed(magnitude / 1_000_000_000, 2)}B"
    elif magnitude >= 1_000_000:
        body = f"{_fixed(magnitude / 1_000_000, 2)}M"
    elif magnitude >= 10_000:
        body = f"{_fixed(magnitude / 1_000, 1)}K"
    else:
        body = _fixed(magnitude, 2, grouping=True)
    return f"{sign}${body}"


def format_date(value: str) -> str:
    """
    Render a leading YYYY-MM-DD as "3rd Apr 2013"; anything else passes through.

    Time components after the date are ignored.
    """
    match = _ISO_DATE_PREFIX.match(value)
    if not match:
        return value
    year, month, day = match.group(1), int(match.group(2)), int(match.group(3))
    if not 1 <= month <= 12:
        return value
    return f"{ordinal(day)} {MONTH_ABBREVIATIONS[month - 1]} {year}"


def _format_number(value: float, field_type: SemanticType) -> str:
    if field_type is SemanticType.QUARTER:
        return f"Q{plain_text(value)}" if 1 <= value <= 4 else plain_text(value)
    if field_type is SemanticType.MONTH:
        if 1 <= value <= 12 and float(value).is_integer():
            return MONTH_ABBREVIATIONS[int(value) - 1]
        return plain_text(value)
    if field_type is SemanticType.YEAR:
        return plain_text(value)
    if field_type is SemanticType.PERCENTAGE:
        return f"{_fixed(value * 100, 2)}%"
    if field_type is SemanticType.MONEY:
        return format_money(value)
    return _grouped(value)


def format_value(value: Any, field_name: str, metadata: Sequence[ColumnMetadata] | None = None) -> str:
    """
    Render a value according to its column's semantic type.

    Args:
        value: Normalized cell value
        field_name: Column the value belongs to
        metadata: Optional column metadata

    Returns:
        Display string

    Examples:
        >>> from analytics_chat.core.field_types import ColumnMetadata, SemanticType
        >>> format_value(0.1534, "y", [ColumnMetadata("y", SemanticType.PERCENTAGE)])
        '15.34%'
        >>> format_value(2, "q", [ColumnMetadata("q", SemanticType.QUARTER)])
        'Q2'
    """
    kind = classify(value)
    if kind is ValueKind.NULL:
        return MISSING_VALUE
    if kind is ValueKind.ARRAY:
        return f"[{len(value)} items]"
    if kind is ValueKind.RECORD:
        return "[object]"

    field_type = get_column_type(field_name, metadata)

    if is_finite_number(value):
        return _format_number(value, field_type)

    if kind is ValueKind.TEXT and field_type is SemanticType.DATE:
        return format_date(value)

    return plain_text(value)
