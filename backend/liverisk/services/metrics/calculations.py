"""
Risk Metric Calculations

Pure NumPy implementations of the per-instrument risk metrics.
All math is deterministic: identical history in, identical metrics out.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from liverisk.core.config import Settings, get_settings
from liverisk.schemas.risk import MetricsSnapshot


@dataclass(frozen=True)
class MetricsParams:
    """Tunable constants for compute_metrics."""

    return_window: int = 60
    trading_days: int = 252
    z_score: float = 2.33
    loss_lookback: int = 5  # number of price moves, i.e. lookback + 1 prices

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MetricsParams":
        settings = settings or get_settings()
        return cls(
            return_window=settings.return_window,
            trading_days=settings.trading_days,
            z_score=settings.var_z_score,
            loss_lookback=settings.loss_lookback,
        )


DEFAULT_PARAMS = MetricsParams()


# =============================================================================
# RETURNS
# =============================================================================


def log_returns(prices: np.ndarray) -> np.ndarray:
    """
    Log-returns between consecutive prices.

    Non-finite results (zero or negative prices) are dropped.
    """
    if len(prices) < 2:
        return np.empty(0)

    with np.errstate(divide="ignore", invalid="ignore"):
        returns = np.log(prices[1:] / prices[:-1])
    return returns[np.isfinite(returns)]


def rolling_window(values: np.ndarray, window: int) -> np.ndarray:
    """Last `window` values (all of them if fewer)."""
    if window <= 0:
        return values[:0]
    return values[-window:]


def mean_and_variance(returns: np.ndarray) -> tuple[float, float]:
    """Arithmetic mean and population variance. (0, 0) for an empty window."""
    if returns.size == 0:
        return 0.0, 0.0

    mean = float(np.mean(returns))
    variance = float(np.mean((returns - mean) ** 2))
    return mean, variance


# =============================================================================
# VOLATILITY / VAR
# =============================================================================


def annualized_sigma(variance: float, trading_days: int = 252) -> float:
    """Daily standard deviation scaled by sqrt(trading days)."""
    return math.sqrt(max(0.0, variance)) * math.sqrt(trading_days)


def parametric_var(mean: float, sigma: float, price: float, z_score: float = 2.33) -> float:
    """
    One-tail Gaussian Value-at-Risk in price units.

    Positive means expected loss, negative means no expected loss.
    """
    return -(mean - z_score * sigma) * price


# =============================================================================
# SHORT-TERM CHANGE
# =============================================================================


def loss_percent(prices: np.ndarray, lookback: int = 5) -> float:
    """
    Percent change over the last `lookback` price moves.

    0 when fewer than two prices are available.
    """
    recent = prices[-(lookback + 1):]
    if len(recent) < 2:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        change = (recent[-1] / recent[0] - 1) * 100
    return float(change) if np.isfinite(change) else 0.0


def round2(value: float) -> float:
    """Round to cents, folding -0.0 into 0.0."""
    return round(float(value), 2) + 0.0


# =============================================================================
# COMPOSITE
# =============================================================================


def compute_metrics(
    symbol: str,
    history: Sequence[float],
    current_price: float,
    params: MetricsParams = DEFAULT_PARAMS,
) -> MetricsSnapshot:
    """
    Compute the full MetricsSnapshot for one instrument.

    Args:
        symbol: Instrument symbol
        history: Prices, oldest first
        current_price: Latest price (VaR is scaled by it)
        params: Window sizes and constants

    Returns:
        MetricsSnapshot with values rounded to 2 decimals
    """
    prices = np.asarray(history, dtype=float)

    returns = rolling_window(log_returns(prices), params.return_window)
    mean, variance = mean_and_variance(returns)
    sigma = annualized_sigma(variance, params.trading_days)

    return MetricsSnapshot(
        symbol=symbol,
        last_price=current_price,
        volatility_ann=round2(sigma * 100),
        var_1d=round2(parametric_var(mean, sigma, current_price, params.z_score)),
        loss_pct=round2(loss_percent(prices, params.loss_lookback)),
    )
