"""
Suggestion Engine

CONTRACT:
    Input:  list[MetricsSnapshot]
    Output: list[Suggestion]

RESPONSIBILITIES:
    - Flag instruments with a recent drop below -1.5% (stop-loss alert)
    - Flag instruments with 1-day VaR above $40 (hedge alert)
    - When nothing is risky, propose up to 3 stable instruments
    - Attach substitute symbols from the AlternativeMapper to alerts
"""

from liverisk.services.suggestions.alternatives import AlternativeMapper
from liverisk.services.suggestions.interface import SuggestionServiceInterface
from liverisk.services.suggestions.service import SuggestionRules, SuggestionService

__all__ = [
    "AlternativeMapper",
    "SuggestionServiceInterface",
    "SuggestionRules",
    "SuggestionService",
]
