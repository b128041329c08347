"""
Chart Planner - decides whether and how a result set is charted.

plan_chart is a pure function of (rows, column metadata, display limit).
It returns a frozen ChartPlan that is rebuilt from scratch whenever any of
those inputs change. A plan with chartable=False always carries a reason for
the UI to show; it is a normal outcome, not an error.

Rejections, in priority order:
1. fewer than MIN_CHART_ROWS flattened rows
2. no numeric field
3. no categorical field
4. more than MAX_CHART_ROWS flattened rows (table only)
5. no metric left once the axis field is excluded

Chart type is chosen by the ordered CHART_TYPE_RULES chain.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Any

import structlog

from analytics_chat.core.chart_config import (
    CHART_LIMIT_STEPS,
    DEFAULT_CHART_LIMIT,
    GROUPED_BAR_MAX_ROWS,
    HORIZONTAL_BAR_MAX_ROWS,
    LONG_LABEL_CHARS,
    MAX_CHART_ROWS,
    MAX_TOOLTIP_CONTEXT_FIELDS,
    MIN_CHART_ROWS,
    SHOW_MORE_STEP,
)
from analytics_chat.core.field_selector import (
    build_field_profile,
    find_related_name_field,
    is_time_series_field,
    select_categorical_field,
)
from analytics_chat.core.field_types import ColumnMetadata, SemanticType
from analytics_chat.core.metric_selector import select_primary_metric, select_secondary_metric
from analytics_chat.core.normalizer import flatten_rows
from analytics_chat.core.schema_inspector import get_column_type
from analytics_chat.core.type_aliases import FlattenedRow
from analytics_chat.core.values import ValueKind, classify, compare_values, normalize_rows

logger = structlog.get_logger()

__all__ = [
    "ChartType",
    "ChartPlan",
    "ChartTypeContext",
    "ChartTypeRule",
    "CHART_TYPE_RULES",
    "LimitOption",
    "REASON_TOO_FEW_ROWS",
    "REASON_NO_NUMERIC_FIELD",
    "REASON_NO_CATEGORICAL_FIELD",
    "REASON_TOO_LARGE",
    "REASON_NO_METRIC",
    "plan_chart",
    "build_chart_plan",
    "sort_rows_for_chart",
    "has_long_labels",
    "metrics_compatible",
    "select_chart_type",
    "limit_options",
    "next_limit",
    "shows_limit_controls",
    "tooltip_context_fields",
]

REASON_TOO_FEW_ROWS = "Not enough rows to chart (at least 2 are needed)."
REASON_NO_NUMERIC_FIELD = "No numeric values to chart."
REASON_NO_CATEGORICAL_FIELD = "No suitable category to chart against."
REASON_TOO_LARGE = f"Dataset too large (>{MAX_CHART_ROWS} rows). Showing table only."
REASON_NO_METRIC = "No suitable metric found."


class ChartType(str, Enum):
    """Chart kinds a renderer must support."""

    LINE = "line"
    BAR = "bar"
    HORIZONTAL_BAR = "horizontal-bar"
    GROUPED_BAR = "grouped-bar"


@dataclass(frozen=True)
class ChartPlan:
    """
    Immutable charting decision for one result set.

    Attributes:
        chartable: False if no chart should be attempted
        reason: Human-readable explanation when chartable is False
        rows: Sorted rows to display (truncated unless time-series)
        categorical_field: Axis field
        name_field: Related label field for tooltips (code/ID axes only)
        primary_metric: Main value series
        secondary_metric: Second series, set only for grouped bars
        chart_type: Selected chart type
        is_time_series: Axis has time semantics (never truncated)
        full_row_count: Number of flattened rows before truncation
    """

    chartable: bool
    reason: str | None = None
    rows: tuple[FlattenedRow, ...] = ()
    categorical_field: str | None = None
    name_field: str | None = None
    primary_metric: str | None = None
    secondary_metric: str | None = None
    chart_type: ChartType | None = None
    is_time_series: bool = False
    full_row_count: int = 0

    @classmethod
    def rejected(cls, reason: str, full_row_count: int) -> ChartPlan:
        """Terminal plan: no chart, table only."""
        return cls(chartable=False, reason=reason, full_row_count=full_row_count)

    @property
    def displayed_row_count(self) -> int:
        return len(self.rows)


# =============================================================================
# Sorting and chart type heuristics
# =============================================================================


def sort_rows_for_chart(
    rows: Sequence[FlattenedRow], categorical_field: str, primary_metric: str, is_time_series: bool
) -> list[FlattenedRow]:
    """
    Order rows for plotting without mutating the input.

    Time series ascend by the axis value; everything else descends by the
    primary metric, missing values counting as 0. Ties keep source order.
    """
    if is_time_series:
        return sorted(
            rows,
            key=cmp_to_key(lambda a, b: compare_values(a.get(categorical_field), b.get(categorical_field))),
        )
    return sorted(rows, key=lambda row: row.get(primary_metric) or 0, reverse=True)


def has_long_labels(rows: Sequence[FlattenedRow], categorical_field: str) -> bool:
    """True if any displayed axis label exceeds LONG_LABEL_CHARS characters."""
    for row in rows:
        value = row.get(categorical_field)
        label = str(value) if value else ""
        if len(label) > LONG_LABEL_CHARS:
            return True
    return False


def metrics_compatible(
    primary: str, secondary: str | None, metadata: Sequence[ColumnMetadata] | None = None
) -> bool:
    """
    Whether two metrics can share one value axis.

    Percentages (0-1 fractions) against money or plain numbers is a scale
    mismatch. Without a secondary metric there is nothing to mismatch.
    """
    if secondary is None:
        return True
    types = (get_column_type(primary, metadata), get_column_type(secondary, metadata))
    large_scale = {SemanticType.MONEY, SemanticType.NUMERIC}
    for first, second in (types, types[::-1]):
        if first is SemanticType.PERCENTAGE and second in large_scale:
            return False
    return True


@dataclass(frozen=True)
class ChartTypeContext:
    """Facts the chart type rules decide on."""

    is_time_series: bool
    displayed_row_count: int
    has_secondary_metric: bool
    has_long_labels: bool
    metrics_compatible: bool


@dataclass(frozen=True)
class ChartTypeRule:
    """One guard of the chart type chain."""

    name: str
    predicate: Callable[[ChartTypeContext], bool]
    chart_type: ChartType


def _time_series(ctx: ChartTypeContext) -> bool:
    return ctx.is_time_series


def _dual_series(ctx: ChartTypeContext) -> bool:
    return (
        ctx.has_secondary_metric
        and ctx.displayed_row_count <= GROUPED_BAR_MAX_ROWS
        and not ctx.has_long_labels
        and ctx.metrics_compatible
    )


def _long_labels(ctx: ChartTypeContext) -> bool:
    return ctx.has_long_labels and ctx.displayed_row_count <= HORIZONTAL_BAR_MAX_ROWS


def _always(ctx: ChartTypeContext) -> bool:
    return True


CHART_TYPE_RULES: tuple[ChartTypeRule, ...] = (
    ChartTypeRule("time_series", _time_series, ChartType.LINE),
    ChartTypeRule("dual_series", _dual_series, ChartType.GROUPED_BAR),
    ChartTypeRule("long_labels", _long_labels, ChartType.HORIZONTAL_BAR),
    ChartTypeRule("single_series", _always, ChartType.BAR),
)


def select_chart_type(ctx: ChartTypeContext, rules: Sequence[ChartTypeRule] = CHART_TYPE_RULES) -> ChartType:
    """Evaluate the chart type chain; first match wins."""
    for rule in rules:
        if rule.predicate(ctx):
            return rule.chart_type
    return ChartType.BAR


# =============================================================================
# Planning
# =============================================================================


def build_chart_plan(
    flattened: Sequence[FlattenedRow],
    metadata: Sequence[ColumnMetadata] | None = None,
    limit: int | None = DEFAULT_CHART_LIMIT,
) -> ChartPlan:
    """
    Plan a chart for already-flattened rows.

    Args:
        flattened: Output of flatten_rows
        metadata: Optional column metadata
        limit: Display limit for non-time-series charts (None shows all)

    Returns:
        ChartPlan
    """
    full_row_count = len(flattened)

    if full_row_count < MIN_CHART_ROWS:
        return _reject(REASON_TOO_FEW_ROWS, full_row_count)

    profile = build_field_profile(flattened, metadata)
    if not profile.numeric_fields:
        return _reject(REASON_NO_NUMERIC_FIELD, full_row_count)

    categorical_field = select_categorical_field(profile)
    if categorical_field is None:
        return _reject(REASON_NO_CATEGORICAL_FIELD, full_row_count)

    if full_row_count > MAX_CHART_ROWS:
        return _reject(REASON_TOO_LARGE, full_row_count)

    metric_fields = [field for field in profile.numeric_fields if field != categorical_field]
    primary_metric = select_primary_metric(metric_fields)
    if primary_metric is None:
        return _reject(REASON_NO_METRIC, full_row_count)

    time_series = is_time_series_field(categorical_field, metadata)
    sorted_rows = sort_rows_for_chart(flattened, categorical_field, primary_metric, time_series)

    displayed = sorted_rows
    if not time_series and limit is not None and len(sorted_rows) > limit:
        displayed = sorted_rows[: max(limit, 0)]

    secondary_metric = select_secondary_metric(metric_fields, primary_metric)
    ctx = ChartTypeContext(
        is_time_series=time_series,
        displayed_row_count=len(displayed),
        has_secondary_metric=secondary_metric is not None,
        has_long_labels=has_long_labels(displayed, categorical_field),
        metrics_compatible=metrics_compatible(primary_metric, secondary_metric, metadata),
    )
    chart_type = select_chart_type(ctx)

    plan = ChartPlan(
        chartable=True,
        rows=tuple(displayed),
        categorical_field=categorical_field,
        name_field=find_related_name_field(flattened, categorical_field, profile.columns),
        primary_metric=primary_metric,
        secondary_metric=secondary_metric if chart_type is ChartType.GROUPED_BAR else None,
        chart_type=chart_type,
        is_time_series=time_series,
        full_row_count=full_row_count,
    )
    logger.debug(
        "chart_plan_built",
        chart_type=chart_type.value,
        categorical_field=categorical_field,
        primary_metric=primary_metric,
        displayed_rows=plan.displayed_row_count,
        full_row_count=full_row_count,
    )
    return plan


def plan_chart(
    data: Any,
    metadata: Sequence[ColumnMetadata] | None = None,
    limit: int | None = DEFAULT_CHART_LIMIT,
) -> ChartPlan:
    """
    Plan a chart for a raw chat response `data` payload.

    Normalizes and flattens the rows, then delegates to build_chart_plan.

    Examples:
        >>> plan = plan_chart([{"_id": {"dept": "A"}, "total": 100}, {"_id": {"dept": "B"}, "total": 50}])
        >>> plan.categorical_field, plan.primary_metric, plan.chart_type.value
        ('group.dept', 'total', 'bar')
    """
    return build_chart_plan(flatten_rows(normalize_rows(data)), metadata, limit)


def _reject(reason: str, full_row_count: int) -> ChartPlan:
    logger.debug("chart_plan_rejected", reason=reason, full_row_count=full_row_count)
    return ChartPlan.rejected(reason, full_row_count)


# =============================================================================
# Display limit controls
# =============================================================================


@dataclass(frozen=True)
class LimitOption:
    """One entry of the chart display limit selector."""

    label: str
    value: int
    enabled: bool


def limit_options(full_row_count: int) -> list[LimitOption]:
    """Limit steps, each disabled when it exceeds the true total; "All" only past the largest step."""
    options = [LimitOption(str(step), step, step <= full_row_count) for step in CHART_LIMIT_STEPS]
    if full_row_count > CHART_LIMIT_STEPS[-1]:
        options.append(LimitOption("All", full_row_count, True))
    return options


def next_limit(limit: int, full_row_count: int) -> int:
    """Limit after one "show more" step, capped at the total."""
    return min(limit + SHOW_MORE_STEP, full_row_count)


def shows_limit_controls(plan: ChartPlan) -> bool:
    """Limit controls apply only to truncatable charts with more than one default page."""
    return plan.chartable and not plan.is_time_series and plan.full_row_count > DEFAULT_CHART_LIMIT


def tooltip_context_fields(row: FlattenedRow, categorical_field: str | None) -> list[str]:
    """Text-valued fields of a data point (axis excluded) shown as tooltip context."""
    fields = [key for key, value in row.items() if key != categorical_field and classify(value) is ValueKind.TEXT]
    return fields[:MAX_TOOLTIP_CONTEXT_FIELDS]
