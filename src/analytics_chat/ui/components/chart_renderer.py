"""
Chart renderer - draws a ChartPlan with matplotlib.

build_figure() is pure (plan in, Figure out) so it can be tested headless;
render_chart() adds the Streamlit chrome: rejection notice, the display limit
controls that write back into the turn's ViewSettings, and a data point
details panel standing in for hover tooltips.
"""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Any

import matplotlib.pyplot as plt
import streamlit as st
import structlog
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from analytics_chat.core.chart_planner import (
    ChartPlan,
    ChartType,
    limit_options,
    next_limit,
    shows_limit_controls,
    tooltip_context_fields,
)
from analytics_chat.core.field_types import ColumnMetadata
from analytics_chat.core.schema_inspector import format_field_name
from analytics_chat.core.type_aliases import FlattenedRow
from analytics_chat.core.value_formatter import format_value
from analytics_chat.core.values import is_finite_number, plain_text
from analytics_chat.core.view_settings import ViewSettingsStore
from analytics_chat.ui.messages import CHART_SHOWING, CHART_UNAVAILABLE, POINT_DETAILS, POINT_SELECT, SHOW_MORE

logger = structlog.get_logger()

PRIMARY_COLOR = "#2563eb"
SECONDARY_COLOR = "#f59e0b"


def _series(rows: Sequence[FlattenedRow], metric: str) -> list[float]:
    """Metric values as floats; non-numeric cells plot as 0."""
    return [float(row[metric]) if is_finite_number(row.get(metric)) else 0.0 for row in rows]


def point_label(plan: ChartPlan, row: FlattenedRow, metadata: Sequence[ColumnMetadata] | None = None) -> str:
    """Axis label for one data point; code-like axes carry their related name."""
    category = plan.categorical_field or ""
    label = format_value(row.get(category), category, metadata)
    if plan.name_field:
        name = row.get(plan.name_field)
        if name is not None and name != "":
            return f"{label} ({plain_text(name)})"
    return label


def point_details(plan: ChartPlan, row: FlattenedRow, metadata: Sequence[ColumnMetadata] | None = None) -> list[str]:
    """
    Lines describing one data point, tooltip style.

    Text context fields come first (axis excluded), then each plotted metric.
    """
    fields = tooltip_context_fields(row, plan.categorical_field)
    fields += [metric for metric in (plan.primary_metric, plan.secondary_metric) if metric]
    return [f"{format_field_name(field)}: {format_value(row.get(field), field, metadata)}" for field in fields]


def _value_formatter(metric: str, metadata: Sequence[ColumnMetadata] | None) -> FuncFormatter:
    return FuncFormatter(lambda value, _pos: format_value(value, metric, metadata))


def build_figure(plan: ChartPlan, metadata: Sequence[ColumnMetadata] | None = None) -> Figure | None:
    """
    Draw a chartable plan.

    Args:
        plan: ChartPlan from the chart planner
        metadata: Column metadata used for axis and tick formatting

    Returns:
        Figure, or None when the plan is not chartable
    """
    if not plan.chartable or plan.categorical_field is None or plan.primary_metric is None:
        return None

    rows = plan.rows
    category = plan.categorical_field
    primary = plan.primary_metric
    labels = [point_label(plan, row, metadata) for row in rows]
    positions = list(range(len(rows)))

    if plan.chart_type is ChartType.HORIZONTAL_BAR:
        fig, ax = plt.subplots(figsize=(10, max(4, 0.35 * len(rows))))
        ax.barh(positions, _series(rows, primary), color=PRIMARY_COLOR)
        ax.set_yticks(positions)
        ax.set_yticklabels(labels)
        ax.invert_yaxis()  # Largest first, reading top-down
        ax.set_xlabel(format_field_name(primary))
        ax.xaxis.set_major_formatter(_value_formatter(primary, metadata))
        ax.grid(True, axis="x", alpha=0.3)
    else:
        fig, ax = plt.subplots(figsize=(10, 6))
        if plan.chart_type is ChartType.LINE:
            ax.plot(positions, _series(rows, primary), color=PRIMARY_COLOR, linewidth=2, marker="o")
        elif plan.chart_type is ChartType.GROUPED_BAR and plan.secondary_metric:
            width = 0.4
            secondary = plan.secondary_metric
            ax.bar(
                [p - width / 2 for p in positions],
                _series(rows, primary),
                width,
                label=format_field_name(primary),
                color=PRIMARY_COLOR,
            )
            ax.bar(
                [p + width / 2 for p in positions],
                _series(rows, secondary),
                width,
                label=format_field_name(secondary),
                color=SECONDARY_COLOR,
            )
            ax.legend()
        else:
            ax.bar(positions, _series(rows, primary), color=PRIMARY_COLOR)
        ax.set_xticks(positions)
        ax.set_xticklabels(labels, rotation=45 if len(rows) > 6 else 0, ha="right" if len(rows) > 6 else "center")
        ax.set_xlabel(format_field_name(category))
        ax.set_ylabel(format_field_name(primary))
        ax.yaxis.set_major_formatter(_value_formatter(primary, metadata))
        ax.grid(True, axis="y", alpha=0.3)

    ax.set_title(f"{format_field_name(primary)} by {format_field_name(category)}")
    fig.tight_layout()
    return fig


def _limit_key(turn_id: str) -> str:
    return f"chart_limit_{turn_id}"


def sync_limit_state(
    state: MutableMapping[str, Any], key: str, current: int, values_by_label: dict[str, int]
) -> int | None:
    """
    Point the limit selectbox at the stored limit before it is drawn.

    The store is the source of truth; the widget state is rewritten every run
    so a limit set by "show more" is not overwritten by a stale selection.

    Returns:
        Index to pass to the selectbox (None when the limit is not an option)
    """
    label = next((name for name, value in values_by_label.items() if value == current), None)
    if label is None:
        state.pop(key, None)
        return None
    state[key] = label
    return 0


def _on_limit_change(store: ViewSettingsStore, turn_id: str, values_by_label: dict[str, int]) -> None:
    choice = st.session_state.get(_limit_key(turn_id))
    if choice is None:
        return
    logger.debug("chart_limit_changed", turn_id=turn_id, limit=values_by_label[choice])
    store.set_chart_limit(turn_id, values_by_label[choice])


def _on_show_more(store: ViewSettingsStore, turn_id: str, full_row_count: int) -> None:
    limit = next_limit(store.get(turn_id).chart_limit, full_row_count)
    logger.debug("chart_limit_changed", turn_id=turn_id, limit=limit)
    store.set_chart_limit(turn_id, limit)


def render_limit_controls(plan: ChartPlan, store: ViewSettingsStore, turn_id: str) -> None:
    """Display limit selector and "show more" for truncated charts."""
    if not shows_limit_controls(plan):
        return

    current = store.get(turn_id).chart_limit
    values_by_label = {option.label: option.value for option in limit_options(plan.full_row_count) if option.enabled}
    key = _limit_key(turn_id)
    index = sync_limit_state(st.session_state, key, current, values_by_label)

    col1, col2, col3 = st.columns([2, 1, 3])
    with col1:
        st.selectbox(
            "Show",
            list(values_by_label),
            index=index,
            key=key,
            on_change=_on_limit_change,
            args=(store, turn_id, values_by_label),
        )
    with col2:
        st.button(
            SHOW_MORE,
            key=f"chart_more_{turn_id}",
            disabled=plan.displayed_row_count >= plan.full_row_count,
            on_click=_on_show_more,
            args=(store, turn_id, plan.full_row_count),
        )
    with col3:
        st.caption(CHART_SHOWING.format(shown=plan.displayed_row_count, total=plan.full_row_count))


def render_point_details(plan: ChartPlan, metadata: Sequence[ColumnMetadata] | None, turn_id: str) -> None:
    """Hover-tooltip stand-in: pick a plotted point and list its context and metrics."""
    if not plan.rows:
        return
    labels = [point_label(plan, row, metadata) for row in plan.rows]
    with st.expander(POINT_DETAILS):
        position = st.selectbox(
            POINT_SELECT,
            range(len(plan.rows)),
            format_func=lambda i: labels[i],
            key=f"chart_point_{turn_id}",
        )
        if position is not None:
            for line in point_details(plan, plan.rows[position], metadata):
                st.caption(line)


def render_chart(
    plan: ChartPlan,
    metadata: Sequence[ColumnMetadata] | None,
    store: ViewSettingsStore,
    turn_id: str,
) -> None:
    """Render a chart plan, or the reason it was rejected."""
    if not plan.chartable:
        st.info(CHART_UNAVAILABLE.format(reason=plan.reason))
        return

    render_limit_controls(plan, store, turn_id)
    fig = build_figure(plan, metadata)
    if fig is not None:
        st.pyplot(fig)
        plt.close(fig)
    render_point_details(plan, metadata, turn_id)
