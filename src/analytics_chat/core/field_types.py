"""
Column semantic types supplied by the chat backend.

The backend annotates some result columns with a SemanticType. Metadata is
optional and partial; anything unresolved is treated as TEXT downstream.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger()

__all__ = ["SemanticType", "ColumnMetadata", "parse_column_metadata", "TIME_TYPES", "TIME_NUMERIC_TYPES"]


class SemanticType(str, Enum):
    """Declared meaning of a column's values."""

    MONEY = "MONEY"
    PERCENTAGE = "PERCENTAGE"
    YEAR = "YEAR"
    QUARTER = "QUARTER"
    MONTH = "MONTH"
    DATE = "DATE"
    NUMERIC = "NUMERIC"
    TEXT = "TEXT"


# Numeric time units usable as an ordered axis
TIME_NUMERIC_TYPES = frozenset({SemanticType.YEAR, SemanticType.QUARTER, SemanticType.MONTH})
TIME_TYPES = TIME_NUMERIC_TYPES | {SemanticType.DATE}


@dataclass(frozen=True)
class ColumnMetadata:
    """
    Semantic annotation for one result column.

    Attributes:
        name: Field name exactly as it appears in flattened rows
        type: Declared semantic type
    """

    name: str
    type: SemanticType

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColumnMetadata:
        """
        Construct ColumnMetadata from a backend `columns` entry.

        Unknown type strings resolve to TEXT rather than failing.
        """
        raw_type = str(data.get("type", SemanticType.TEXT.value)).upper()
        try:
            semantic_type = SemanticType(raw_type)
        except ValueError:
            logger.debug("unknown_semantic_type", column=data.get("name"), type=raw_type)
            semantic_type = SemanticType.TEXT
        return cls(name=str(data["name"]), type=semantic_type)

    def to_dict(self) -> dict[str, str]:
        """Serialize to the backend wire shape."""
        return {"name": self.name, "type": self.type.value}


def parse_column_metadata(columns: Iterable[Any] | None) -> list[ColumnMetadata]:
    """
    Parse the optional `columns` list of a chat response.

    Entries that are already ColumnMetadata pass through; mappings without a
    name are skipped.

    Args:
        columns: Raw metadata entries, or None

    Returns:
        List of ColumnMetadata in input order
    """
    if not columns:
        return []

    parsed: list[ColumnMetadata] = []
    for entry in columns:
        if isinstance(entry, ColumnMetadata):
            parsed.append(entry)
        elif isinstance(entry, Mapping) and entry.get("name") is not None:
            parsed.append(ColumnMetadata.from_dict(entry))
        else:
            logger.debug("column_metadata_skipped", entry=repr(entry))
    return parsed
