"""
Suggestion Service Implementation

Rule-based risk alerts and stable-allocation ideas.
Deterministic: the same metrics always give the same suggestions.
"""

from dataclasses import dataclass
from typing import Optional

from liverisk.core.config import Settings, get_settings
from liverisk.schemas.risk import MetricsSnapshot, Suggestion, SuggestionKind
from liverisk.services.suggestions.alternatives import AlternativeMapper
from liverisk.services.suggestions.interface import SuggestionServiceInterface

STOP_LOSS_TEXT = "Consider stop-loss / reduce position"
HEDGE_TEXT = "Consider hedge/derivative or reduce exposure"
STABLE_REASON = "Stable - low short-term swings"
STABLE_TEXT = "Consider small allocation"


@dataclass(frozen=True)
class SuggestionRules:
    """Classification thresholds."""

    loss_threshold: float = -1.5  # percent
    var_dollar_threshold: float = 40.0
    stable_band: float = 0.5  # |loss_pct| strictly below this is stable
    max_stable: int = 3

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SuggestionRules":
        settings = settings or get_settings()
        return cls(
            loss_threshold=settings.loss_threshold,
            var_dollar_threshold=settings.var_dollar_threshold,
            stable_band=settings.stable_band,
            max_stable=settings.max_stable_suggestions,
        )


def format_number(value: float) -> str:
    """Render like the dashboard does: -2.0 -> '-2', -1.75 -> '-1.75'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class SuggestionService(SuggestionServiceInterface):
    """
    Suggestion Engine.

    Holds only its rules and the alternative mapper; no per-cycle state.
    """

    def __init__(
        self,
        mapper: Optional[AlternativeMapper] = None,
        rules: Optional[SuggestionRules] = None,
    ):
        self._mapper = mapper or AlternativeMapper()
        self._rules = rules or SuggestionRules()

    @property
    def rules(self) -> SuggestionRules:
        return self._rules

    @property
    def mapper(self) -> AlternativeMapper:
        return self._mapper

    async def execute(self, input_data: list[MetricsSnapshot]) -> list[Suggestion]:
        return self.build_suggestions(input_data)

    def classify(self, metrics: MetricsSnapshot) -> Optional[SuggestionKind]:
        # Loss is checked first so it wins when both thresholds trip
        if metrics.loss_pct < self._rules.loss_threshold:
            return SuggestionKind.LOSS
        if metrics.var_1d > self._rules.var_dollar_threshold:
            return SuggestionKind.VAR
        return None

    def is_stable(self, metrics: MetricsSnapshot) -> bool:
        band = self._rules.stable_band
        return -band < metrics.loss_pct < band

    def build_suggestions(self, metrics: list[MetricsSnapshot]) -> list[Suggestion]:
        """Full suggestion set for one cycle."""
        risky = []
        for m in metrics:
            kind = self.classify(m)
            if kind is not None:
                risky.append((m, kind))

        if risky:
            return [self._risk_alert(m, kind) for m, kind in risky]

        stable = [m for m in metrics if self.is_stable(m)][: self._rules.max_stable]
        return [
            Suggestion(
                symbol=m.symbol,
                kind=SuggestionKind.STABLE,
                reason=STABLE_REASON,
                suggestion=STABLE_TEXT,
                alternatives=[],
            )
            for m in stable
        ]

    def _risk_alert(self, metrics: MetricsSnapshot, kind: SuggestionKind) -> Suggestion:
        if kind == SuggestionKind.LOSS:
            reason = f"Recent drop {format_number(metrics.loss_pct)}%"
            text = STOP_LOSS_TEXT
        else:
            reason = f"High VaR ${format_number(metrics.var_1d)}"
            text = HEDGE_TEXT

        return Suggestion(
            symbol=metrics.symbol,
            kind=kind,
            reason=reason,
            suggestion=text,
            alternatives=self._mapper.lookup(metrics.symbol),
        )

    async def health_check(self) -> bool:
        return self._rules.max_stable >= 0 and self._rules.stable_band >= 0
