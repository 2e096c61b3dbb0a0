"""
Price History Store

Owns the mutable state of every instrument: current price,
a bounded price history (oldest-first) and bounded recent quotes (newest-first).
Everything handed out is an immutable snapshot.
"""

import logging
import math
from collections import deque
from typing import Optional

from liverisk.core.config import Settings, get_settings
from liverisk.schemas.risk import InstrumentSnapshot, Quote, now_iso
from liverisk.services.base import InvalidInputError

logger = logging.getLogger(__name__)

SERVICE_NAME = "PriceHistoryStore"


def _normalize_symbol(symbol) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise InvalidInputError(SERVICE_NAME, "Symbol must be a non-empty string", {"symbol": symbol})
    return symbol.strip().upper()


def _validate_price(symbol: str, price) -> float:
    """Return price as float, or raise if it is not a positive finite number."""
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidInputError(
            SERVICE_NAME, f"Price for {symbol} is not a number: {price!r}", {"symbol": symbol}
        )
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise InvalidInputError(
            SERVICE_NAME,
            f"Price for {symbol} must be positive and finite, got {price}",
            {"symbol": symbol, "price": price},
        )
    return price


class Instrument:
    """Mutable per-instrument state. Only the store touches this."""

    def __init__(self, symbol: str, seed_price: float, history_capacity: int, quote_capacity: int):
        self.symbol = symbol
        self.current_price = seed_price
        self.history: deque[float] = deque([seed_price], maxlen=history_capacity)
        # appendleft on a full deque drops the rightmost (oldest) quote
        self.quotes: deque[Quote] = deque(maxlen=quote_capacity)

    def snapshot(self) -> InstrumentSnapshot:
        return InstrumentSnapshot(
            symbol=self.symbol,
            current_price=self.current_price,
            history=tuple(self.history),
            quotes=tuple(self.quotes),
        )


class PriceHistoryStore:
    """
    Bounded price history for a fixed set of instruments.

    Usage:
        store = PriceHistoryStore()
        store.seed("AAPL", 175.12)
        store.apply_tick("AAPL", 176.0, "2024-01-02T10:00:00+00:00")
        snap = store.snapshot("AAPL")
    """

    def __init__(self, history_capacity: int = 500, quote_capacity: int = 20):
        if history_capacity < 1:
            raise ValueError("history_capacity must be >= 1")
        if quote_capacity < 0:
            raise ValueError("quote_capacity must be >= 0")
        self._history_capacity = history_capacity
        self._quote_capacity = quote_capacity
        self._instruments: dict[str, Instrument] = {}

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PriceHistoryStore":
        settings = settings or get_settings()
        return cls(
            history_capacity=settings.history_capacity,
            quote_capacity=settings.quote_capacity,
        )

    @property
    def history_capacity(self) -> int:
        return self._history_capacity

    @property
    def quote_capacity(self) -> int:
        return self._quote_capacity

    @property
    def symbols(self) -> list[str]:
        """Seeded symbols in seed order."""
        return list(self._instruments)

    def __contains__(self, symbol) -> bool:
        return isinstance(symbol, str) and symbol.strip().upper() in self._instruments

    def __len__(self) -> int:
        return len(self._instruments)

    def seed(self, symbol: str, initial_price: float) -> InstrumentSnapshot:
        """Create an instrument whose history is [initial_price]."""
        symbol = _normalize_symbol(symbol)
        price = _validate_price(symbol, initial_price)
        if symbol in self._instruments:
            raise InvalidInputError(SERVICE_NAME, f"{symbol} is already seeded", {"symbol": symbol})

        instrument = Instrument(symbol, price, self._history_capacity, self._quote_capacity)
        self._instruments[symbol] = instrument
        logger.debug(f"Seeded {symbol} at {price}")
        return instrument.snapshot()

    def apply_tick(self, symbol: str, new_price: float, timestamp: Optional[str] = None) -> float:
        """
        Apply one price update.

        Validation happens before any mutation, so a rejected tick
        leaves history, quotes and current price untouched.

        Returns:
            The instrument's previous price.

        Raises:
            InvalidInputError: unknown symbol, non-finite or non-positive price
        """
        symbol = _normalize_symbol(symbol)
        instrument = self._instruments.get(symbol)
        if instrument is None:
            raise InvalidInputError(SERVICE_NAME, f"Unknown symbol: {symbol}", {"symbol": symbol})
        price = _validate_price(symbol, new_price)

        previous = instrument.current_price
        instrument.history.append(price)
        instrument.quotes.appendleft(Quote(price=price, timestamp=timestamp or now_iso()))
        instrument.current_price = price
        return previous

    def snapshot(self, symbol: str) -> InstrumentSnapshot:
        """Immutable copy of one instrument."""
        symbol = _normalize_symbol(symbol)
        instrument = self._instruments.get(symbol)
        if instrument is None:
            raise InvalidInputError(SERVICE_NAME, f"Unknown symbol: {symbol}", {"symbol": symbol})
        return instrument.snapshot()

    def snapshots(self) -> list[InstrumentSnapshot]:
        """Immutable copies of all instruments, in seed order."""
        return [instrument.snapshot() for instrument in self._instruments.values()]

    def clear(self) -> None:
        self._instruments.clear()
