"""
Table renderer - shows a TableView page as a polars frame.

Header buttons cycle the sort (asc → desc → none); page size and
previous/next write back into the turn's ViewSettings.
"""

from __future__ import annotations

import polars as pl
import streamlit as st
import structlog

from analytics_chat.core.chart_config import ROWS_PER_PAGE_OPTIONS
from analytics_chat.core.table_engine import SortDirection, TableView, toggle_sort, with_page, with_rows_per_page
from analytics_chat.core.view_settings import ViewSettingsStore
from analytics_chat.ui.messages import NEXT_PAGE, PREVIOUS_PAGE, TABLE_EMPTY

logger = structlog.get_logger()

SORT_ARROWS = {SortDirection.ASC: " ▲", SortDirection.DESC: " ▼"}


def header_label(view: TableView, column: str, header: str) -> str:
    """Header text with the current sort arrow, if this column is sorted."""
    settings = view.settings
    if settings.sort_column == column and settings.sort_direction is not None:
        return f"{header}{SORT_ARROWS[settings.sort_direction]}"
    return header


def _unique_headers(headers: tuple[str, ...]) -> list[str]:
    """Frame column names must be unique; repeated labels get a numeric suffix."""
    seen: dict[str, int] = {}
    unique = []
    for header in headers:
        count = seen.get(header, 0)
        seen[header] = count + 1
        unique.append(header if count == 0 else f"{header} ({count + 1})")
    return unique


def to_frame(view: TableView) -> pl.DataFrame:
    """Formatted cells of the page as a string-typed frame."""
    names = _unique_headers(view.headers)
    data = {name: [row[index] for row in view.cells] for index, name in enumerate(names)}
    return pl.DataFrame(data, schema={name: pl.Utf8 for name in names})


def render_table(view: TableView, store: ViewSettingsStore, turn_id: str) -> None:
    """Render one table page with sort and paging controls."""
    if view.total_rows == 0 or not view.columns:
        st.info(TABLE_EMPTY)
        return

    header_cols = st.columns(len(view.columns))
    for index, (column, header) in enumerate(zip(view.columns, view.headers, strict=True)):
        with header_cols[index]:
            if st.button(header_label(view, column, header), key=f"sort_{turn_id}_{column}"):
                updated = toggle_sort(view.settings, column)
                logger.debug(
                    "table_sort_changed",
                    turn_id=turn_id,
                    column=updated.sort_column,
                    direction=updated.sort_direction.value if updated.sort_direction else None,
                )
                store.set_table(turn_id, updated)
                st.rerun()

    st.dataframe(to_frame(view), hide_index=True, width="stretch")

    col1, col2, col3, col4 = st.columns([2, 1, 1, 3])
    with col1:
        rows_per_page = st.selectbox(
            "Rows per page",
            ROWS_PER_PAGE_OPTIONS,
            index=ROWS_PER_PAGE_OPTIONS.index(view.settings.rows_per_page)
            if view.settings.rows_per_page in ROWS_PER_PAGE_OPTIONS
            else 0,
            key=f"rows_per_page_{turn_id}",
        )
    with col2:
        previous_clicked = st.button(PREVIOUS_PAGE, key=f"prev_{turn_id}", disabled=not view.has_previous)
    with col3:
        next_clicked = st.button(NEXT_PAGE, key=f"next_{turn_id}", disabled=not view.has_next)
    with col4:
        st.caption(f"{view.summary()} (page {view.page} of {view.total_pages})")

    if rows_per_page != view.settings.rows_per_page:
        store.set_table(turn_id, with_rows_per_page(view.settings, rows_per_page))
        st.rerun()
    if previous_clicked:
        store.set_table(turn_id, with_page(view.settings, view.page - 1))
        st.rerun()
    if next_clicked:
        store.set_table(turn_id, with_page(view.settings, view.page + 1))
        st.rerun()
