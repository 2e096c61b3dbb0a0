"""
Return/Metrics Calculator

CONTRACT:
    Input:  list[InstrumentSnapshot]
    Output: list[MetricsSnapshot]

RESPONSIBILITIES:
    - Log-returns over the price history
    - Rolling (60-return) annualized volatility
    - 1-day parametric VaR (z = 2.33)
    - Short-window percentage change

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from liverisk.services.metrics.calculations import MetricsParams, compute_metrics
from liverisk.services.metrics.interface import MetricsServiceInterface
from liverisk.services.metrics.service import MetricsService

__all__ = [
    "MetricsParams",
    "compute_metrics",
    "MetricsServiceInterface",
    "MetricsService",
]
