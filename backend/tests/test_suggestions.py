import pytest

from liverisk.schemas.risk import MetricsSnapshot, SuggestionKind
from liverisk.services.suggestions import AlternativeMapper, SuggestionRules, SuggestionService
from liverisk.services.suggestions.service import format_number


def snap(symbol, loss_pct=0.0, var_1d=0.0, price=100.0, vol=10.0) -> MetricsSnapshot:
    return MetricsSnapshot(
        symbol=symbol,
        last_price=price,
        volatility_ann=vol,
        var_1d=var_1d,
        loss_pct=loss_pct,
    )


@pytest.fixture
def service() -> SuggestionService:
    return SuggestionService()


def test_loss_trigger(service):
    [s] = service.build_suggestions([snap("AAPL", loss_pct=-2.0, var_1d=10)])
    assert s.kind == SuggestionKind.LOSS
    assert "-2" in s.reason
    assert s.reason == "Recent drop -2%"
    assert s.suggestion == "Consider stop-loss / reduce position"
    assert s.alternatives == ["MSFT", "GOOGL"]


def test_loss_wins_when_both_trigger(service):
    [s] = service.build_suggestions([snap("TSLA", loss_pct=-3.25, var_1d=90.5)])
    assert s.kind == SuggestionKind.LOSS
    assert s.reason == "Recent drop -3.25%"
    assert s.suggestion == "Consider stop-loss / reduce position"
    assert s.alternatives == ["NIO", "RIVN"]


def test_var_trigger(service):
    [s] = service.build_suggestions([snap("MSFT", loss_pct=0.1, var_1d=45.5)])
    assert s.kind == SuggestionKind.VAR
    assert s.reason == "High VaR $45.5"
    assert s.suggestion == "Consider hedge/derivative or reduce exposure"
    assert s.alternatives == ["AAPL", "GOOGL"]


def test_unknown_risky_symbol_gets_default_alternatives(service):
    [s] = service.build_suggestions([snap("ZZZZ", var_1d=41)])
    assert s.alternatives == ["SPY", "QQQ"]


def test_risky_set_suppresses_stable_ideas(service):
    metrics = [
        snap("AAPL", loss_pct=0.0),
        snap("MSFT", loss_pct=-1.6),
        snap("TSLA", loss_pct=0.2),
        snap("GOOGL", var_1d=50),
    ]
    suggestions = service.build_suggestions(metrics)
    assert [(s.symbol, s.kind) for s in suggestions] == [
        ("MSFT", SuggestionKind.LOSS),
        ("GOOGL", SuggestionKind.VAR),
    ]


def test_all_stable_gives_at_most_three(service):
    metrics = [snap(sym, loss_pct=0.1) for sym in ("AAPL", "MSFT", "TSLA", "GOOGL", "META")]
    suggestions = service.build_suggestions(metrics)

    assert [s.symbol for s in suggestions] == ["AAPL", "MSFT", "TSLA"]
    for s in suggestions:
        assert s.kind == SuggestionKind.STABLE
        assert s.reason == "Stable - low short-term swings"
        assert s.suggestion == "Consider small allocation"
        assert s.alternatives == []


def test_thresholds_are_strict(service):
    # Exactly on a threshold is neither risky nor stable
    metrics = [
        snap("AAPL", loss_pct=-1.5),
        snap("MSFT", var_1d=40),
        snap("TSLA", loss_pct=0.5),
        snap("GOOGL", loss_pct=-0.5),
    ]
    assert service.classify(metrics[0]) is None
    assert service.classify(metrics[1]) is None
    assert not service.is_stable(metrics[2])
    assert not service.is_stable(metrics[3])

    # Only MSFT (loss 0, VaR not above 40) qualifies as stable
    suggestions = service.build_suggestions(metrics)
    assert [(s.symbol, s.kind) for s in suggestions] == [("MSFT", SuggestionKind.STABLE)]


def test_no_risky_and_no_stable_gives_nothing(service):
    assert service.build_suggestions([snap("AAPL", loss_pct=1.0), snap("MSFT", loss_pct=-1.0)]) == []
    assert service.build_suggestions([]) == []


def test_output_is_rebuilt_each_cycle(service):
    risky = service.build_suggestions([snap("AAPL", loss_pct=-2.0)])
    calm = service.build_suggestions([snap("AAPL", loss_pct=0.0)])
    assert risky[0].kind == SuggestionKind.LOSS
    assert [s.kind for s in calm] == [SuggestionKind.STABLE]


def test_custom_rules_and_mapper():
    service = SuggestionService(
        AlternativeMapper({"BTC": ["ETH"]}, default=["CASH"]),
        SuggestionRules(loss_threshold=-5.0, var_dollar_threshold=100.0, stable_band=1.0, max_stable=1),
    )
    calm = service.build_suggestions([snap("BTC", loss_pct=-2.0), snap("X", loss_pct=0.9)])
    assert [(s.symbol, s.kind) for s in calm] == [("X", SuggestionKind.STABLE)]
    [alert] = service.build_suggestions([snap("BTC", loss_pct=-6.0)])
    assert alert.alternatives == ["ETH"]


def test_rules_from_settings(engine_settings):
    assert SuggestionRules.from_settings(engine_settings) == SuggestionRules()


async def test_execute_matches_build(service):
    metrics = [snap("AAPL", loss_pct=-2.0), snap("MSFT", var_1d=41)]
    assert await service.execute(metrics) == service.build_suggestions(metrics)
    assert await service.health_check() is True


@pytest.mark.parametrize(
    "value, expected",
    [(-2.0, "-2"), (-1.75, "-1.75"), (45.5, "45.5"), (40.01, "40.01"), (0.0, "0"), (1234.5, "1234.5")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
