"""
Table Engine - sorts and paginates flattened rows for tabular display.

Settings are immutable: every interaction (header click, page change,
rows-per-page change) returns a new TableSettings. build_table_view is a
pure function of (rows, settings, metadata).

Sort direction cycles asc -> desc -> none on repeated clicks of one column;
clicking a different column starts at asc. Any sort or rows-per-page change
resets to page 1.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from functools import cmp_to_key

from analytics_chat.core.chart_config import DEFAULT_ROWS_PER_PAGE
from analytics_chat.core.field_types import ColumnMetadata
from analytics_chat.core.schema_inspector import get_columns, table_header_label
from analytics_chat.core.type_aliases import FlattenedRow
from analytics_chat.core.value_formatter import format_value
from analytics_chat.core.values import compare_values

__all__ = [
    "SortDirection",
    "TableSettings",
    "TableView",
    "toggle_sort",
    "with_rows_per_page",
    "with_page",
    "sort_rows",
    "build_table_view",
]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class TableSettings:
    """
    Caller-owned table view state for one result set.

    Attributes:
        page: 1-based page number
        rows_per_page: Page size
        sort_column: Column being sorted, or None for source order
        sort_direction: Direction, or None for source order
    """

    page: int = 1
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    sort_column: str | None = None
    sort_direction: SortDirection | None = None


def toggle_sort(settings: TableSettings, column: str) -> TableSettings:
    """Apply a header click on `column`."""
    if settings.sort_column == column:
        if settings.sort_direction is SortDirection.ASC:
            return replace(settings, sort_direction=SortDirection.DESC, page=1)
        if settings.sort_direction is SortDirection.DESC:
            return replace(settings, sort_column=None, sort_direction=None, page=1)
    return replace(settings, sort_column=column, sort_direction=SortDirection.ASC, page=1)


def with_rows_per_page(settings: TableSettings, rows_per_page: int) -> TableSettings:
    """Change the page size; always returns to page 1."""
    return replace(settings, rows_per_page=max(int(rows_per_page), 1), page=1)


def with_page(settings: TableSettings, page: int) -> TableSettings:
    return replace(settings, page=max(int(page), 1))


def sort_rows(
    rows: Sequence[FlattenedRow], column: str | None, direction: SortDirection | None
) -> list[FlattenedRow]:
    """
    Sort rows by one column without mutating the input.

    Null and missing values sort last in both directions.
    """
    if not column or direction is None:
        return list(rows)

    sign = 1 if direction is SortDirection.ASC else -1

    def compare(left: FlattenedRow, right: FlattenedRow) -> int:
        left_value, right_value = left.get(column), right.get(column)
        if left_value is None:
            return 0 if right_value is None else 1
        if right_value is None:
            return -1
        return sign * compare_values(left_value, right_value)

    return sorted(rows, key=cmp_to_key(compare))


@dataclass(frozen=True)
class TableView:
    """
    One rendered page of the table.

    Attributes:
        columns: Display columns (get_columns order)
        headers: Header labels, aligned with columns
        rows: Raw rows on this page
        cells: Formatted cell text per row, aligned with columns
        page: Effective page (clamped into range)
        total_pages: Number of pages (at least 1)
        total_rows: Rows across all pages
        settings: Settings the view was built from
    """

    columns: tuple[str, ...]
    headers: tuple[str, ...]
    rows: tuple[FlattenedRow, ...]
    cells: tuple[tuple[str, ...], ...]
    page: int
    total_pages: int
    total_rows: int
    settings: TableSettings

    @property
    def start_row(self) -> int:
        """1-based index of the first row on this page (0 when empty)."""
        if self.total_rows == 0:
            return 0
        return (self.page - 1) * self.settings.rows_per_page + 1

    @property
    def end_row(self) -> int:
        return min(self.page * self.settings.rows_per_page, self.total_rows)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def summary(self) -> str:
        return f"Showing {self.start_row} to {self.end_row} of {self.total_rows} results"


def build_table_view(
    rows: Sequence[FlattenedRow],
    settings: TableSettings | None = None,
    metadata: Sequence[ColumnMetadata] | None = None,
) -> TableView:
    """
    Build the sorted, paginated, formatted view of flattened rows.

    Args:
        rows: Full flattened row set
        settings: Table settings (defaults when None)
        metadata: Optional column metadata for cell formatting

    Returns:
        TableView for the requested page
    """
    settings = settings or TableSettings()
    columns = tuple(get_columns(rows))
    sorted_rows = sort_rows(rows, settings.sort_column, settings.sort_direction)

    rows_per_page = max(settings.rows_per_page, 1)
    total_pages = max(math.ceil(len(sorted_rows) / rows_per_page), 1)
    page = min(max(settings.page, 1), total_pages)

    start = (page - 1) * rows_per_page
    page_rows = tuple(sorted_rows[start : start + rows_per_page])
    cells = tuple(tuple(format_value(row.get(column), column, metadata) for column in columns) for row in page_rows)

    return TableView(
        columns=columns,
        headers=tuple(table_header_label(column) for column in columns),
        rows=page_rows,
        cells=cells,
        page=page,
        total_pages=total_pages,
        total_rows=len(sorted_rows),
        settings=settings,
    )
