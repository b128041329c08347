"""Tests for column semantic type metadata."""

from analytics_chat.core.field_types import TIME_TYPES, ColumnMetadata, SemanticType, parse_column_metadata


class TestColumnMetadata:
    """Test suite for metadata parsing."""

    def test_from_dict_parses_known_type_case_insensitively(self):
        assert ColumnMetadata.from_dict({"name": "total", "type": "money"}).type is SemanticType.MONEY

    def test_from_dict_unknown_or_missing_type_is_text(self):
        assert ColumnMetadata.from_dict({"name": "x", "type": "CURRENCY"}).type is SemanticType.TEXT
        assert ColumnMetadata.from_dict({"name": "x"}).type is SemanticType.TEXT

    def test_parse_column_metadata_skips_entries_without_name(self):
        # Arrange
        existing = ColumnMetadata("fy", SemanticType.YEAR)
        raw = [{"name": "total", "type": "MONEY"}, {"type": "YEAR"}, "junk", existing]

        # Act
        parsed = parse_column_metadata(raw)

        # Assert
        assert parsed == [ColumnMetadata("total", SemanticType.MONEY), existing]

    def test_parse_column_metadata_none_is_empty(self):
        assert parse_column_metadata(None) == []

    def test_to_dict_round_trips_wire_shape(self):
        wire = {"name": "q", "type": "QUARTER"}
        assert ColumnMetadata.from_dict(wire).to_dict() == wire

    def test_time_types_cover_year_quarter_month_date(self):
        assert TIME_TYPES == {SemanticType.YEAR, SemanticType.QUARTER, SemanticType.MONTH, SemanticType.DATE}
