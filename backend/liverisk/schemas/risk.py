"""
CONTRACT: Live Risk Engine

Input: Tick stream (symbol, price, ISO-8601 timestamp)
Output: RiskState (MetricsSnapshot per instrument + Suggestions)

Metrics and suggestions are DERIVED data.
They are recomputed in full on every processed tick and never patched.
"""

from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# ENUMS
# =============================================================================


class SuggestionKind(str, Enum):
    LOSS = "LOSS"  # Recent drop below loss threshold
    VAR = "VAR"  # 1-day VaR above dollar threshold
    STABLE = "STABLE"  # Low short-term swings


# =============================================================================
# INPUT: Tick
# =============================================================================


class Tick(BaseModel):
    """
    One price update for one instrument.
    Sent by: TickFeed / API
    Received by: TickDispatcher

    The price is NOT range-checked here; the history store is the
    validation boundary so rejected ticks are counted and logged in one place.
    """

    symbol: str = Field(..., min_length=1, max_length=20)
    price: float
    timestamp: str = Field(default_factory=now_iso, description="ISO-8601")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v):
        return v.strip().upper()


# =============================================================================
# STATE: Instrument snapshots
# =============================================================================


class Quote(BaseModel):
    """A recent quote event."""

    model_config = ConfigDict(frozen=True)

    price: float
    timestamp: str


class InstrumentSnapshot(BaseModel):
    """
    Immutable copy of an instrument's state.
    History is oldest-first, quotes are newest-first.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    current_price: float
    history: tuple[float, ...]
    quotes: tuple[Quote, ...] = ()


# =============================================================================
# OUTPUT: Metrics
# =============================================================================


class MetricsSnapshot(BaseModel):
    """Risk metrics for one instrument at one point in time."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    last_price: float
    volatility_ann: float = Field(..., ge=0, description="Annualized volatility, %")
    var_1d: float = Field(..., description="1-day parametric VaR in price units")
    loss_pct: float = Field(..., description="% change over the trailing window")

    @computed_field
    @property
    def risk_level(self) -> float:
        """Risk bar value (0-100)."""
        return min(100.0, self.volatility_ann)


# =============================================================================
# OUTPUT: Suggestions
# =============================================================================


class Suggestion(BaseModel):
    """Actionable suggestion for one instrument."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    kind: SuggestionKind
    reason: str
    suggestion: str
    alternatives: list[str] = Field(default_factory=list)


# =============================================================================
# OUTPUT: Activity + aggregate state
# =============================================================================


class ActivityEntry(BaseModel):
    """Log-worthy engine event."""

    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default_factory=now_iso)
    text: str


class RiskState(BaseModel):
    """
    Everything a consumer needs after a processed tick.
    Sent by: TickDispatcher
    Received by: API / SSE subscribers
    """

    metrics: list[MetricsSnapshot] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ticks_processed: int = 0
    ticks_rejected: int = 0

    @computed_field
    @property
    def alert_count(self) -> int:
        return len(self.suggestions)

    @computed_field
    @property
    def watched(self) -> int:
        return len(self.metrics)
