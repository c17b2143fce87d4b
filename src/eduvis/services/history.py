"""Bounded most-recent-first history of successful results."""

from collections import deque

from eduvis.domain.history import HistoryEntry

HISTORY_LIMIT = 50


class SessionHistory:
    """In-memory history for one browser session."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be positive")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    def add(self, entry: HistoryEntry) -> None:
        """Prepend an entry, dropping the oldest one on overflow."""
        self._entries.appendleft(entry)

    def entries(self) -> list[HistoryEntry]:
        """Return entries ordered most recent first."""
        return list(self._entries)

    def get(self, position: int) -> HistoryEntry | None:
        """Return the entry at a 0-based position from the most recent."""
        if position < 0 or position >= len(self._entries):
            return None
        return self._entries[position]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
