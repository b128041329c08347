"""
Categorical field selection - picks the chart axis for a result set.

The axis is chosen by an ordered guard chain (CATEGORICAL_RULES). Each rule
yields candidate fields in column order plus a cardinality cap; the first
candidate whose distinct-value count lands in [MIN_CATEGORY_VALUES, cap]
wins. Cardinality is always measured over the full, untruncated row set.

Key functions:
- build_field_profile: Inspect rows once (columns, numeric subset, metadata)
- select_categorical_field: Evaluate the guard chain
- is_time_series_field: Time semantics from the declared type
- find_related_name_field: Human label column for a code/ID axis
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import structlog

from analytics_chat.core.chart_config import MAX_CATEGORY_VALUES, MAX_NUMERIC_CATEGORY_VALUES, MIN_CATEGORY_VALUES
from analytics_chat.core.field_types import TIME_NUMERIC_TYPES, TIME_TYPES, ColumnMetadata, SemanticType
from analytics_chat.core.normalizer import GROUP_KEY
from analytics_chat.core.schema_inspector import distinct_count, get_column_type, get_columns, get_numeric_fields
from analytics_chat.core.type_aliases import FlattenedRow

logger = structlog.get_logger()

__all__ = [
    "FieldProfile",
    "CategoricalRule",
    "CATEGORICAL_RULES",
    "build_field_profile",
    "select_categorical_field",
    "is_time_series_field",
    "find_related_name_field",
]

_CODE_TOKEN = re.compile(r"(code|id|key|num)", re.IGNORECASE)
_LABEL_TOKEN = re.compile(r"name|title|description", re.IGNORECASE)


@dataclass(frozen=True)
class FieldProfile:
    """
    Schema facts about one flattened result set.

    Attributes:
        rows: Flattened rows (full set, untruncated)
        columns: get_columns(rows)
        numeric_fields: get_numeric_fields(rows)
        metadata: Optional column metadata
    """

    rows: Sequence[FlattenedRow]
    columns: tuple[str, ...]
    numeric_fields: tuple[str, ...]
    metadata: tuple[ColumnMetadata, ...] = ()

    def type_of(self, field: str) -> SemanticType:
        return get_column_type(field, self.metadata)

    def non_numeric_fields(self) -> list[str]:
        return [column for column in self.columns if column not in self.numeric_fields]


def build_field_profile(
    rows: Sequence[FlattenedRow], metadata: Sequence[ColumnMetadata] | None = None
) -> FieldProfile:
    """Inspect rows once for all selectors."""
    columns = get_columns(rows)
    return FieldProfile(
        rows=rows,
        columns=tuple(columns),
        numeric_fields=tuple(get_numeric_fields(rows, columns)),
        metadata=tuple(metadata or ()),
    )


@dataclass(frozen=True)
class CategoricalRule:
    """One guard of the axis selection chain."""

    name: str
    candidates: Callable[[FieldProfile], Iterable[str]]
    max_values: int = MAX_CATEGORY_VALUES

    def match(self, profile: FieldProfile) -> str | None:
        """Return the first candidate within the cardinality bounds, or None."""
        for field in self.candidates(profile):
            if MIN_CATEGORY_VALUES <= distinct_count(profile.rows, field) <= self.max_values:
                return field
        return None


def _group_key(profile: FieldProfile) -> list[str]:
    return [GROUP_KEY] if GROUP_KEY in profile.columns else []


def _numeric_time_units(profile: FieldProfile) -> list[str]:
    return [field for field in profile.numeric_fields if profile.type_of(field) in TIME_NUMERIC_TYPES]


def _text_dates(profile: FieldProfile) -> list[str]:
    return [field for field in profile.non_numeric_fields() if profile.type_of(field) is SemanticType.DATE]


def _any_non_numeric(profile: FieldProfile) -> list[str]:
    return profile.non_numeric_fields()


def _numeric_codes(profile: FieldProfile) -> list[str]:
    return list(profile.numeric_fields)


CATEGORICAL_RULES: tuple[CategoricalRule, ...] = (
    CategoricalRule("group_key", _group_key),
    CategoricalRule("numeric_time_unit", _numeric_time_units),
    CategoricalRule("text_date", _text_dates),
    CategoricalRule("non_numeric", _any_non_numeric),
    CategoricalRule("numeric_code", _numeric_codes, max_values=MAX_NUMERIC_CATEGORY_VALUES),
)


def select_categorical_field(
    profile: FieldProfile, rules: Sequence[CategoricalRule] = CATEGORICAL_RULES
) -> str | None:
    """
    Choose the chart axis field.

    Args:
        profile: Field profile of the full row set
        rules: Ordered guard chain (first match wins)

    Returns:
        Field name, or None when the result set has no usable axis
    """
    for rule in rules:
        field = rule.match(profile)
        if field is not None:
            logger.debug("categorical_field_selected", field=field, rule=rule.name)
            return field

    logger.debug("categorical_field_not_found", columns=list(profile.columns))
    return None


def is_time_series_field(field: str, metadata: Sequence[ColumnMetadata] | None = None) -> bool:
    """True if the field's declared type is YEAR, QUARTER, MONTH or DATE."""
    return get_column_type(field, metadata) in TIME_TYPES


def find_related_name_field(
    rows: Sequence[FlattenedRow], code_field: str, columns: Sequence[str] | None = None
) -> str | None:
    """
    Find a human-readable label column for a code/ID axis field.

    "Supplier Code" pairs with e.g. "Supplier Name". A bare "id" pairs with
    any name/title/description field populated in the first row. Used only
    to enrich tooltips; the axis itself is never replaced.

    Args:
        rows: Flattened rows
        code_field: Chosen categorical field
        columns: Precomputed get_columns(rows), if available

    Returns:
        Related field name, or None
    """
    if not _CODE_TOKEN.search(code_field):
        return None

    base_name = _CODE_TOKEN.sub("", code_field).strip().lower()
    fields = get_columns(rows) if columns is None else columns

    for field in fields:
        if field == code_field or not _LABEL_TOKEN.search(field):
            continue
        if base_name and base_name in field.lower():
            return field
        if not base_name and rows and rows[0].get(field):
            return field

    return None
