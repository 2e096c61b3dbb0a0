"""
Queue Tick Feed

Bounded feed that an external producer pushes ticks into.
"""

import asyncio
import logging
from typing import AsyncIterator

from liverisk.schemas.risk import Tick
from liverisk.services.base import QueueFullError
from liverisk.services.feed.interface import TickFeed

logger = logging.getLogger(__name__)

# Wakes a consumer blocked on an empty queue when the feed closes
_CLOSED = object()


class QueueTickFeed(TickFeed):
    """
    Ticks are delivered in push order. Pushed ticks wait in the queue while
    no stream is running, and are picked up by the next ticks() call.

    Usage:
        feed = QueueTickFeed(maxsize=100)
        dispatcher.attach_feed(feed)
        await feed.push(Tick(symbol="AAPL", price=176.0))
    """

    def __init__(self, maxsize: int = 1000):
        if maxsize < 1:
            raise ValueError("QueueTickFeed needs room for at least one tick")
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._wakeup_queued = False

    @property
    def name(self) -> str:
        return "QueueTickFeed"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Ticks pushed but not yet delivered."""
        return self._queue.qsize() - int(self._wakeup_queued)

    async def push(self, tick: Tick) -> None:
        """Add a tick, waiting for space if the feed is full."""
        await self._queue.put(tick)

    def push_nowait(self, tick: Tick) -> None:
        """Add a tick, raising QueueFullError if the feed is full."""
        try:
            self._queue.put_nowait(tick)
        except asyncio.QueueFull:
            raise QueueFullError(self.name, "Tick feed is full", {"symbol": tick.symbol})

    async def ticks(self) -> AsyncIterator[Tick]:
        self._closed = False
        while not self._closed:
            item = await self._queue.get()
            if item is _CLOSED:
                self._wakeup_queued = False
                # Wakeup from close(); a restarted stream keeps waiting
                continue
            yield item

    async def close(self) -> None:
        self._closed = True
        # A consumer can only be blocked when the queue is empty
        if self._queue.empty():
            self._queue.put_nowait(_CLOSED)
            self._wakeup_queued = True
        logger.info(f"{self.name} closed")
