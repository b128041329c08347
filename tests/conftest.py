"""
Pytest configuration and fixtures for analytics chat tests.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analytics_chat.core.field_types import ColumnMetadata, SemanticType  # noqa: E402


@pytest.fixture(scope="session")
def project_root():
    """Return project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Result Row Fixtures (DRY - Single Source of Truth)
# ============================================================================


@pytest.fixture
def grouped_dept_rows():
    """Aggregation rows grouped by a record `_id` (department totals)."""
    return [
        {"_id": {"dept": "A"}, "total": 100},
        {"_id": {"dept": "B"}, "total": 50},
    ]


@pytest.fixture
def dept_metadata():
    return [
        ColumnMetadata("group.dept", SemanticType.TEXT),
        ColumnMetadata("total", SemanticType.MONEY),
    ]


@pytest.fixture
def make_supplier_rows():
    """
    Factory for flat supplier rows with two metrics.

    Args:
        count: Number of rows (distinct suppliers)
        label_length: Minimum supplier label length (padded with "x")
    """

    def _make(count: int = 5, label_length: int = 0) -> list[dict]:
        rows = []
        for i in range(count):
            label = f"Supplier {i}"
            if len(label) < label_length:
                label = label + "x" * (label_length - len(label))
            rows.append({"supplier": label, "total_spend": 1000 - i * 10, "order_count": 5 + i})
        return rows

    return _make


@pytest.fixture
def make_yearly_rows():
    """
    Factory for rows keyed by fiscal year, in scrambled order.

    Args:
        count: Number of rows
        years: Distinct years cycled through
    """

    def _make(count: int = 120, years: tuple[int, ...] = (2015, 2012, 2014, 2013)) -> list[dict]:
        return [{"fiscal_year": years[i % len(years)], "total_spend": 100 + i} for i in range(count)]

    return _make


@pytest.fixture
def year_metadata():
    return [
        ColumnMetadata("fiscal_year", SemanticType.YEAR),
        ColumnMetadata("total_spend", SemanticType.MONEY),
    ]
