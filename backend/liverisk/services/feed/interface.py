"""
Tick Feed Interface

A feed is a lazy, possibly infinite, async sequence of ticks.
Calling ticks() again after close() starts a fresh stream (reconnect).
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from liverisk.schemas.risk import Tick


class TickFeed(ABC):
    """Source of price updates."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Feed name for logging."""
        pass

    @abstractmethod
    def ticks(self) -> AsyncIterator[Tick]:
        """Yield ticks one at a time, in delivery order."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Stop delivering ticks. Already delivered ticks are unaffected."""
        pass
