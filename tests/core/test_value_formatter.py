"""Tests for Value Formatter - semantic type aware display strings."""

import pytest

from analytics_chat.core.field_types import ColumnMetadata, SemanticType
from analytics_chat.core.value_formatter import format_date, format_money, format_value, ordinal


def _meta(name: str, semantic_type: SemanticType) -> list[ColumnMetadata]:
    return [ColumnMetadata(name, semantic_type)]


class TestFormatValueScenarios:
    """Representative values per semantic type."""

    def test_format_value_money_millions(self):
        assert format_value(1234567, "x", _meta("x", SemanticType.MONEY)) == "$1.23M"

    def test_format_value_percentage_fraction(self):
        assert format_value(0.1534, "y", _meta("y", SemanticType.PERCENTAGE)) == "15.34%"

    def test_format_value_quarter_prefix(self):
        assert format_value(2, "q", _meta("q", SemanticType.QUARTER)) == "Q2"

    def test_format_value_is_deterministic(self):
        metadata = _meta("x", SemanticType.MONEY)
        assert format_value(98765.4, "x", metadata) == format_value(98765.4, "x", metadata)


class TestFormatValueByType:
    """Formatting rules per type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (2_500_000_000, "$2.50B"),
            (1_234_567, "$1.23M"),
            (15_300, "$15.3K"),
            (9_999.5, "$9,999.50"),
            (950.5, "$950.50"),
            (-15_300, "-$15.3K"),
            (0, "$0.00"),
        ],
    )
    def test_format_money_scales_by_magnitude(self, value, expected):
        assert format_money(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, "Q1"), (4, "Q4"), (5, "5"), (0, "0")],
    )
    def test_format_value_quarter_out_of_range_passes_through(self, value, expected):
        assert format_value(value, "q", _meta("q", SemanticType.QUARTER)) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, "Jan"), (12, "Dec"), (13, "13"), (2.5, "2.5")],
    )
    def test_format_value_month_abbreviation_for_integers_1_to_12(self, value, expected):
        assert format_value(value, "m", _meta("m", SemanticType.MONTH)) == expected

    def test_format_value_year_has_no_grouping(self):
        assert format_value(2013, "fy", _meta("fy", SemanticType.YEAR)) == "2013"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1234567, "1,234,567"), (1234.5678, "1,234.568"), (2.5, "2.5"), (3.0, "3"), (-0.0001, "0")],
    )
    def test_format_value_numeric_grouped_up_to_3_decimals(self, value, expected):
        assert format_value(value, "n") == expected

    def test_format_value_date_text_renders_ordinal_day(self):
        metadata = _meta("d", SemanticType.DATE)
        assert format_value("2013-04-03", "d", metadata) == "3rd Apr 2013"
        assert format_value("2014-11-21T00:00:00Z", "d", metadata) == "21st Nov 2014"

    def test_format_value_unparsable_date_passes_through(self):
        metadata = _meta("d", SemanticType.DATE)
        assert format_value("April 2013", "d", metadata) == "April 2013"
        assert format_value("2013-13-01", "d", metadata) == "2013-13-01"


class TestFormatValueRounding:
    """Exact halves round away from zero."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(12_250, "$12.3K"), (1_125_000, "$1.13M"), (2.125, "$2.13"), (-12_250, "-$12.3K"), (1_005.125, "$1,005.13")],
    )
    def test_format_money_half_rounds_up(self, value, expected):
        assert format_money(value) == expected

    def test_format_value_numeric_half_rounds_up(self):
        assert format_value(0.0625, "n") == "0.063"
        assert format_value(-0.0625, "n") == "-0.063"

    def test_format_value_percentage_keeps_two_decimals(self):
        assert format_value(0.5, "p", _meta("p", SemanticType.PERCENTAGE)) == "50.00%"


class TestFormatValueEdgeCases:
    """Missing and non-scalar values."""

    def test_format_value_missing_renders_dash(self):
        assert format_value(None, "x") == "-"

    def test_format_value_array_and_record_placeholders(self):
        assert format_value([1, 2, 3], "x") == "[3 items]"
        assert format_value({"a": 1}, "x") == "[object]"

    def test_format_value_boolean_and_text(self):
        assert format_value(True, "x") == "true"
        assert format_value("Acme", "x", _meta("x", SemanticType.MONEY)) == "Acme"

    def test_format_value_non_finite_number_as_plain_text(self):
        assert format_value(float("nan"), "x", _meta("x", SemanticType.MONEY)) == "NaN"


class TestOrdinal:
    """Ordinal day suffixes."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (13, "13th"), (22, "22nd")],
    )
    def test_ordinal_suffixes(self, day, expected):
        assert ordinal(day) == expected

    def test_format_date_ignores_time_component(self):
        assert format_date("2012-07-01 13:45:00") == "1st Jul 2012"
