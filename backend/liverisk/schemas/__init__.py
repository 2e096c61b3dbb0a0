"""
LiveRisk Schema Contracts

This module defines all JSON contracts between engine components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from liverisk.schemas.risk import (
    Tick,
    Quote,
    InstrumentSnapshot,
    MetricsSnapshot,
    Suggestion,
    SuggestionKind,
    ActivityEntry,
    RiskState,
)

__all__ = [
    # Input
    "Tick",
    # State
    "Quote",
    "InstrumentSnapshot",
    # Output
    "MetricsSnapshot",
    "Suggestion",
    "SuggestionKind",
    "ActivityEntry",
    "RiskState",
]
