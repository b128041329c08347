"""
Row normalizer - flattens grouped and nested query rows.

Aggregation results carry their grouping key under `_id` (a scalar or a
record of group fields) and may embed arrays of records. flatten_rows turns
them into uniform flat rows suitable for tabulation and charting.

Only the first array-of-record field of a row (in key order) is expanded.
Other such arrays are reduced to an "[n items]" summary, so secondary detail
of multi-array rows is not shown.
"""

from __future__ import annotations

from collections.abc import Iterable

from analytics_chat.core.type_aliases import FlattenedRow, ResultRow
from analytics_chat.core.values import ValueKind, classify, is_record_array, plain_text

__all__ = ["GROUP_KEY", "GROUP_PREFIX", "flatten_rows", "flatten_row", "summarize_array"]

ID_KEY = "_id"
GROUP_KEY = "group"
GROUP_PREFIX = "group."


def summarize_array(values: list) -> str:
    """Render a non-expanded array as display text."""
    if values and classify(values[0]) is ValueKind.RECORD:
        return f"[{len(values)} items]"
    return ", ".join(plain_text(value) for value in values)


def _expand_group_key(row: ResultRow) -> ResultRow:
    flattened = dict(row)
    if ID_KEY not in flattened:
        return flattened

    group_value = flattened.pop(ID_KEY)
    if classify(group_value) is ValueKind.RECORD:
        for key, value in group_value.items():
            flattened[f"{GROUP_PREFIX}{key}"] = value
    else:
        flattened[GROUP_KEY] = group_value
    return flattened


def flatten_row(row: ResultRow) -> list[FlattenedRow]:
    """
    Flatten a single result row.

    Args:
        row: Raw result row (never mutated)

    Returns:
        One row, or one row per element of the expanded array field
    """
    flattened = _expand_group_key(row)

    expansion_key = next((key for key, value in flattened.items() if is_record_array(value)), None)
    if expansion_key is None:
        return [flattened]

    # Parent context: scalars pass through, other arrays are summarized, records dropped
    parent: FlattenedRow = {}
    for key, value in flattened.items():
        kind = classify(value)
        if kind is ValueKind.ARRAY:
            if key != expansion_key and value:
                parent[key] = summarize_array(value)
        elif kind is not ValueKind.RECORD:
            parent[key] = value

    expanded: list[FlattenedRow] = []
    for item in flattened[expansion_key]:
        child = {**parent}
        if classify(item) is ValueKind.RECORD:
            child.update(item)
        expanded.append(child)
    return expanded


def flatten_rows(rows: Iterable[ResultRow]) -> list[FlattenedRow]:
    """
    Flatten result rows, preserving order.

    Rows expanded from one source row are emitted contiguously, in the order
    of the source array.

    Examples:
        >>> flatten_rows([{"_id": {"dept": "A"}, "total": 100}])
        [{'total': 100, 'group.dept': 'A'}]
    """
    result: list[FlattenedRow] = []
    for row in rows:
        result.extend(flatten_row(row))
    return result
