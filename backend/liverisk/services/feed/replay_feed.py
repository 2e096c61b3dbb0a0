"""
Replay Tick Feed

Replays a recorded tick sequence, optionally paced.
"""

import asyncio
from typing import AsyncIterator, Iterable

from liverisk.schemas.risk import Tick
from liverisk.services.feed.interface import TickFeed


class ReplayTickFeed(TickFeed):
    """Finite feed over a fixed list of ticks. Each ticks() call replays from the start."""

    def __init__(self, ticks: Iterable[Tick], interval_ms: int = 0):
        self._ticks = list(ticks)
        self._interval = interval_ms / 1000.0
        self._closed = False

    @property
    def name(self) -> str:
        return "ReplayTickFeed"

    def __len__(self) -> int:
        return len(self._ticks)

    async def ticks(self) -> AsyncIterator[Tick]:
        self._closed = False
        for tick in self._ticks:
            if self._closed:
                break
            if self._interval:
                await asyncio.sleep(self._interval)
            yield tick

    async def close(self) -> None:
        self._closed = True
