"""
Activity Log

Bounded, newest-first record of engine events for human consumption.
"""

from collections import deque
from typing import Optional

from liverisk.schemas.risk import ActivityEntry, now_iso


class ActivityLog:
    def __init__(self, capacity: int = 200):
        self._entries: deque[ActivityEntry] = deque(maxlen=capacity)

    def record(self, text: str, timestamp: Optional[str] = None) -> ActivityEntry:
        entry = ActivityEntry(timestamp=timestamp or now_iso(), text=text)
        self._entries.appendleft(entry)
        return entry

    def entries(self, limit: Optional[int] = None) -> list[ActivityEntry]:
        """Newest first."""
        entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
