"""
Mock Tick Feed

Generates a random-walk price stream for development and testing.
"""

import asyncio
import logging
import random
from typing import AsyncIterator, Callable, Optional

from liverisk.core.config import Settings, get_settings
from liverisk.schemas.risk import Tick, now_iso
from liverisk.services.feed.interface import TickFeed

logger = logging.getLogger(__name__)


class MockTickFeed(TickFeed):
    """
    Every interval, pick one instrument at random and move its last price
    by a uniform change in [-max_change_pct, +max_change_pct] percent.

    Usage:
        feed = MockTickFeed({"AAPL": 175.12, "MSFT": 360.80})
        async for tick in feed.ticks():
            ...
        await feed.close()
    """

    def __init__(
        self,
        base_prices: dict[str, float],
        interval_ms: int = 800,
        max_change_pct: float = 1.5,
        seed: Optional[int] = None,
        price_source: Optional[Callable[[str], float]] = None,
    ):
        if not base_prices:
            raise ValueError("MockTickFeed needs at least one instrument")
        self._last_prices = dict(base_prices)
        self._symbols = list(base_prices)
        self._interval = interval_ms / 1000.0
        self._max_change = max_change_pct / 100.0
        self._rng = random.Random(seed)
        # Reads the engine's last price so other tick sources don't drift apart
        self._price_source = price_source
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        price_source: Optional[Callable[[str], float]] = None,
    ) -> "MockTickFeed":
        settings = settings or get_settings()
        return cls(
            settings.instrument_seeds,
            interval_ms=settings.mock_feed_interval_ms,
            max_change_pct=settings.mock_feed_max_change_pct,
            seed=settings.mock_feed_seed,
            price_source=price_source,
        )

    @property
    def name(self) -> str:
        return "MockTickFeed"

    @property
    def closed(self) -> bool:
        return self._closed

    def _last_price(self, symbol: str) -> float:
        if self._price_source is not None:
            return self._price_source(symbol)
        return self._last_prices[symbol]

    def next_tick(self) -> Tick:
        """Generate one tick immediately."""
        symbol = self._rng.choice(self._symbols)
        change = self._rng.uniform(-self._max_change, self._max_change)
        new_price = round(self._last_price(symbol) * (1 + change), 2)
        self._last_prices[symbol] = new_price
        return Tick(symbol=symbol, price=new_price, timestamp=now_iso())

    async def ticks(self) -> AsyncIterator[Tick]:
        self._closed = False
        logger.info(f"{self.name} streaming {len(self._symbols)} symbols every {self._interval}s")
        while not self._closed:
            await asyncio.sleep(self._interval)
            if self._closed:
                break
            yield self.next_tick()

    async def close(self) -> None:
        self._closed = True
        logger.info(f"{self.name} closed")
