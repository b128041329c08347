"""
ViewSettingsStore - per-turn chart and table view settings.

Each assistant turn owns its own ViewSettings (chart limit, table page,
rows-per-page, sort). Records are immutable; the store maps turn ids to the
current record so two turns can never clobber each other's view. Pure Python,
zero Streamlit dependencies.
"""

from collections import deque
from dataclasses import dataclass, field, replace

from analytics_chat.core.chart_config import DEFAULT_CHART_LIMIT
from analytics_chat.core.table_engine import TableSettings

__all__ = ["ViewSettings", "ViewSettingsStore"]


@dataclass(frozen=True)
class ViewSettings:
    """Immutable view settings for one result set."""

    chart_limit: int = DEFAULT_CHART_LIMIT
    table: TableSettings = field(default_factory=TableSettings)

    def with_chart_limit(self, limit: int) -> "ViewSettings":
        return replace(self, chart_limit=max(int(limit), 1))

    def with_table(self, table: TableSettings) -> "ViewSettings":
        return replace(self, table=table)


class ViewSettingsStore:
    """
    Maps turn ids to their ViewSettings with LRU eviction.

    Turns without stored settings read as defaults; evicted turns fall back
    to defaults as well.
    """

    def __init__(self, max_size: int = 100) -> None:
        """
        Initialize settings store.

        Args:
            max_size: Maximum number of turns to remember (default: 100)
        """
        self._max_size = max_size
        self._settings: dict[str, ViewSettings] = {}
        # LRU order of turn ids, oldest first
        self._history: deque[str] = deque(maxlen=max_size)

    def get(self, turn_id: str | None) -> ViewSettings:
        """
        Get settings for a turn.

        Args:
            turn_id: Turn identifier, or None for no active turn

        Returns:
            Stored ViewSettings, or defaults
        """
        if turn_id is None:
            return ViewSettings()
        settings = self._settings.get(turn_id)
        if settings is None:
            return ViewSettings()
        self._touch(turn_id)
        return settings

    def put(self, turn_id: str, settings: ViewSettings) -> ViewSettings:
        """
        Store settings for a turn, evicting the oldest turn if full.

        Returns:
            The stored settings
        """
        evicted_id = None
        if len(self._history) == self._max_size and turn_id not in self._history:
            evicted_id = self._history[0]

        self._touch(turn_id)
        self._settings[turn_id] = settings

        if evicted_id is not None:
            self._settings.pop(evicted_id, None)
        return settings

    def set_chart_limit(self, turn_id: str, limit: int) -> ViewSettings:
        return self.put(turn_id, self.get(turn_id).with_chart_limit(limit))

    def set_table(self, turn_id: str, table: TableSettings) -> ViewSettings:
        return self.put(turn_id, self.get(turn_id).with_table(table))

    def ensure(self, turn_id: str) -> ViewSettings:
        """Initialize defaults for a turn unless it already has settings."""
        if turn_id in self._settings:
            return self.get(turn_id)
        return self.put(turn_id, ViewSettings())

    def clear(self) -> None:
        self._settings = {}
        self._history = deque(maxlen=self._max_size)

    def __contains__(self, turn_id: object) -> bool:
        return turn_id in self._settings

    def __len__(self) -> int:
        return len(self._settings)

    def _touch(self, turn_id: str) -> None:
        if turn_id in self._history:
            self._history.remove(turn_id)
        self._history.append(turn_id)
