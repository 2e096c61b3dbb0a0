"""
Suggestion Service Interface

Defines the contract for the suggestion layer.
"""

from abc import abstractmethod
from typing import Optional

from liverisk.services.base import BaseService
from liverisk.schemas.risk import MetricsSnapshot, Suggestion, SuggestionKind


class SuggestionServiceInterface(BaseService[list[MetricsSnapshot], list[Suggestion]]):
    """
    Suggestion Service Contract.

    INPUT: list[MetricsSnapshot]
        - The full metrics set for the current cycle

    OUTPUT: list[Suggestion]
        - Replaces the previous cycle's set wholesale

    RULES (in order):
        1. Risky = loss_pct < loss threshold OR var_1d > VaR threshold
        2. Any risky -> one alert per risky instrument (loss trigger wins ties)
        3. None risky -> up to N stable-allocation ideas
    """

    @property
    def name(self) -> str:
        return "SuggestionService"

    @abstractmethod
    async def execute(self, input_data: list[MetricsSnapshot]) -> list[Suggestion]:
        """Build the suggestion set from the current metrics."""
        pass

    @abstractmethod
    def classify(self, metrics: MetricsSnapshot) -> Optional[SuggestionKind]:
        """Risk trigger for one instrument, or None if it is not risky."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Rules allow a non-negative stable band and suggestion count."""
        pass
