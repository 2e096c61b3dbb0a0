"""
Metrics Service Interface

Defines the contract for the risk metrics layer.
"""

from abc import abstractmethod

from liverisk.services.base import BaseService
from liverisk.schemas.risk import InstrumentSnapshot, MetricsSnapshot


class MetricsServiceInterface(BaseService[list[InstrumentSnapshot], list[MetricsSnapshot]]):
    """
    Metrics Service Contract.

    INPUT: list[InstrumentSnapshot]
        - Immutable copies taken after the tick was applied

    OUTPUT: list[MetricsSnapshot]
        - One per instrument, same order as the input
        - volatility_ann, var_1d, loss_pct rounded to 2 decimals
    """

    @property
    def name(self) -> str:
        return "MetricsService"

    @abstractmethod
    async def execute(self, input_data: list[InstrumentSnapshot]) -> list[MetricsSnapshot]:
        """Compute metrics for every instrument."""
        pass

    @abstractmethod
    def calculate_for_instrument(self, snapshot: InstrumentSnapshot) -> MetricsSnapshot:
        """Compute metrics for a single instrument."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Parameters describe a usable window, year length and lookback."""
        pass
