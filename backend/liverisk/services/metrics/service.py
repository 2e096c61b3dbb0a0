"""
Metrics Service Implementation

Maps the pure metric calculations over every instrument snapshot.
Holds no state between calls.
"""

from typing import Optional

from liverisk.schemas.risk import InstrumentSnapshot, MetricsSnapshot
from liverisk.services.metrics.calculations import DEFAULT_PARAMS, MetricsParams, compute_metrics
from liverisk.services.metrics.interface import MetricsServiceInterface


class MetricsService(MetricsServiceInterface):
    """
    Return/Metrics Calculator.

    Recomputes every metric from scratch on each call.
    """

    def __init__(self, params: Optional[MetricsParams] = None):
        self._params = params or DEFAULT_PARAMS

    @property
    def params(self) -> MetricsParams:
        return self._params

    async def execute(self, input_data: list[InstrumentSnapshot]) -> list[MetricsSnapshot]:
        """Compute metrics for every instrument."""
        return self.calculate_all(input_data)

    def calculate_all(self, snapshots: list[InstrumentSnapshot]) -> list[MetricsSnapshot]:
        return [self.calculate_for_instrument(snapshot) for snapshot in snapshots]

    def calculate_for_instrument(self, snapshot: InstrumentSnapshot) -> MetricsSnapshot:
        return compute_metrics(
            snapshot.symbol,
            snapshot.history,
            snapshot.current_price,
            self._params,
        )

    async def health_check(self) -> bool:
        params = self._params
        return params.return_window >= 1 and params.trading_days >= 1 and params.loss_lookback >= 1
