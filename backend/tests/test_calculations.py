import math

import numpy as np
import pytest

from liverisk.services.metrics import MetricsParams, compute_metrics
from liverisk.services.metrics.calculations import (
    annualized_sigma,
    log_returns,
    loss_percent,
    mean_and_variance,
    parametric_var,
    rolling_window,
)


def test_single_price_history_has_no_risk():
    m = compute_metrics("AAPL", [100.0], 100.0)
    assert m.volatility_ann == 0
    assert m.var_1d == 0
    assert m.loss_pct == 0
    assert math.copysign(1.0, m.var_1d) == 1.0  # no negative zero leaks out
    assert m.last_price == 100.0


def test_loss_pct_over_trailing_moves():
    m = compute_metrics("AAPL", [100, 99, 98, 97, 96, 95], 95)
    assert m.loss_pct == -5.00


def test_loss_percent_short_histories():
    assert loss_percent(np.array([100.0])) == 0.0
    assert loss_percent(np.array([100.0, 90.0])) == pytest.approx(-10.0)
    assert loss_percent(np.array([])) == 0.0


def test_loss_percent_ignores_prices_outside_lookback():
    prices = np.array([50.0, 100.0, 101.0, 102.0, 103.0, 104.0, 105.0])
    assert loss_percent(prices, lookback=5) == pytest.approx(5.0)


def test_known_volatility_and_var():
    # Returns are +ln(1.1) and -ln(1.1): mean 0, daily sigma ln(1.1)
    m = compute_metrics("AAPL", [100.0, 110.0, 100.0], 100.0)
    sigma = math.log(1.1) * math.sqrt(252)

    assert m.volatility_ann == pytest.approx(round(sigma * 100, 2), abs=0.01)
    assert m.var_1d == pytest.approx(round(2.33 * sigma * 100, 2), abs=0.01)
    assert m.loss_pct == 0.0


def test_var_can_be_negative_when_no_loss_expected():
    # One positive return, zero variance
    m = compute_metrics("AAPL", [100.0, 102.0], 102.0)
    assert m.volatility_ann == 0.0
    assert m.var_1d == pytest.approx(-round(math.log(1.02) * 102.0, 2), abs=0.01)
    assert m.var_1d < 0
    assert m.loss_pct == 2.0


def test_compute_metrics_is_pure():
    rng = np.random.default_rng(7)
    history = list(100 * np.exp(np.cumsum(rng.normal(0, 0.01, 300))))
    first = compute_metrics("MSFT", history, history[-1])
    second = compute_metrics("MSFT", list(history), history[-1])
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_rolling_window_uses_last_60_returns():
    # A single large jump followed by 60 flat prices falls outside the window
    history = [100.0, 200.0] + [200.0] * 60
    assert compute_metrics("AAPL", history, 200.0).volatility_ann == 0.0

    wide = MetricsParams(return_window=61)
    assert compute_metrics("AAPL", history, 200.0, wide).volatility_ann > 0


def test_log_returns_drop_non_finite_values():
    returns = log_returns(np.array([100.0, 110.0, 0.0, 50.0, -5.0]))
    assert returns.tolist() == pytest.approx([math.log(1.1)])
    assert log_returns(np.array([100.0])).size == 0


def test_rolling_window_and_moments_on_empty_input():
    assert rolling_window(np.arange(5.0), 60).tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert rolling_window(np.arange(5.0), 2).tolist() == [3.0, 4.0]
    assert mean_and_variance(np.empty(0)) == (0.0, 0.0)


def test_sigma_and_var_helpers():
    assert annualized_sigma(-1e-18) == 0.0
    assert annualized_sigma(0.0004, trading_days=252) == pytest.approx(0.02 * math.sqrt(252))
    assert parametric_var(0.0, 0.5, 100.0, z_score=2.0) == pytest.approx(100.0)
    assert parametric_var(0.01, 0.0, 100.0) == pytest.approx(-1.0)


def test_volatility_is_never_negative():
    m = compute_metrics("TSLA", [250.0, 251.0, 249.0, 250.5, 248.0], 248.0)
    assert m.volatility_ann >= 0
    assert m.risk_level == min(100.0, m.volatility_ann)


def test_params_from_settings(engine_settings):
    params = MetricsParams.from_settings(engine_settings)
    assert params == MetricsParams(return_window=60, trading_days=252, z_score=2.33, loss_lookback=5)
