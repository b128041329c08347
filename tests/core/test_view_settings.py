"""Tests for per-turn view settings."""

from analytics_chat.core.table_engine import TableSettings
from analytics_chat.core.view_settings import ViewSettings, ViewSettingsStore


class TestViewSettings:
    """Immutable settings record."""

    def test_view_settings_defaults(self):
        settings = ViewSettings()
        assert settings.chart_limit == 10
        assert settings.table == TableSettings()

    def test_view_settings_with_chart_limit_returns_new_record(self):
        # Arrange
        settings = ViewSettings()

        # Act
        updated = settings.with_chart_limit(30)

        # Assert
        assert updated.chart_limit == 30
        assert settings.chart_limit == 10


class TestViewSettingsStore:
    """Settings keyed by turn id."""

    def test_store_unknown_turn_reads_defaults(self):
        store = ViewSettingsStore()
        assert store.get("missing") == ViewSettings()
        assert store.get(None) == ViewSettings()
        assert "missing" not in store

    def test_store_turns_do_not_clobber_each_other(self):
        # Arrange
        store = ViewSettingsStore()
        store.ensure("turn-1")
        store.ensure("turn-2")

        # Act
        store.set_chart_limit("turn-1", 50)
        store.set_table("turn-2", TableSettings(page=3))

        # Assert
        assert store.get("turn-1").chart_limit == 50
        assert store.get("turn-1").table.page == 1
        assert store.get("turn-2").chart_limit == 10
        assert store.get("turn-2").table.page == 3

    def test_store_ensure_keeps_existing_settings(self):
        # Arrange
        store = ViewSettingsStore()
        store.set_chart_limit("turn-1", 30)

        # Act
        settings = store.ensure("turn-1")

        # Assert
        assert settings.chart_limit == 30

    def test_store_evicts_least_recently_used_turn(self):
        # Arrange
        store = ViewSettingsStore(max_size=2)
        store.set_chart_limit("a", 20)
        store.set_chart_limit("b", 30)
        store.get("a")  # a is now most recent

        # Act
        store.set_chart_limit("c", 50)

        # Assert
        assert "a" in store
        assert "b" not in store
        assert "c" in store
        assert len(store) == 2

    def test_store_clear_forgets_all_turns(self):
        store = ViewSettingsStore()
        store.set_chart_limit("a", 20)
        store.clear()
        assert len(store) == 0
        assert store.get("a") == ViewSettings()
