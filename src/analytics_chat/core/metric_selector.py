"""Metric selection - picks the numeric series plotted against the axis."""

from __future__ import annotations

import re
from collections.abc import Sequence

__all__ = ["PRIORITY_METRIC_PATTERN", "select_primary_metric", "select_secondary_metric"]

PRIORITY_METRIC_PATTERN = re.compile(r"spend|amount|total|count|avg|mean", re.IGNORECASE)


def select_primary_metric(numeric_fields: Sequence[str]) -> str | None:
    """
    Pick the primary metric.

    Prefers the first field named like a measure (spend, amount, total,
    count, avg, mean), else the first numeric field.

    Args:
        numeric_fields: Numeric fields in column order, axis field excluded

    Returns:
        Field name, or None if there are no numeric fields
    """
    if not numeric_fields:
        return None
    for field in numeric_fields:
        if PRIORITY_METRIC_PATTERN.search(field):
            return field
    return numeric_fields[0]


def select_secondary_metric(numeric_fields: Sequence[str], primary: str | None) -> str | None:
    """First numeric field other than the primary, or None."""
    return next((field for field in numeric_fields if field != primary), None)
