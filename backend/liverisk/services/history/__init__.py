"""
Price History Store

RESPONSIBILITIES:
    - Seed instruments with an initial price
    - Validate and apply ticks (positive, finite prices for known symbols only)
    - Keep the last 500 prices and last 20 quotes per instrument
    - Hand out immutable snapshots, never the live structures
"""

from liverisk.services.history.store import Instrument, PriceHistoryStore

__all__ = [
    "Instrument",
    "PriceHistoryStore",
]
