from dataclasses import replace

import numpy as np
import pytest

from bond_warrant_engine.config import default_input
from bond_warrant_engine.models import WarrantType
from bond_warrant_engine.scenarios import (
    compare_scenarios,
    credit_spread_from_rates,
    payoff_curve,
    rate_grid,
    run_rate_scenarios,
    scenario_label,
    simulated_rate_from_spread,
    time_decay_curve,
    with_simulated_rate,
)
from bond_warrant_engine.simulator import run_simulation


@pytest.fixture(scope="module")
def put_input():
    return default_input()


@pytest.fixture(scope="module")
def call_input(put_input):
    return replace(put_input, warrant=replace(put_input.warrant, type=WarrantType.CALL))


def test_rate_grid_inclusive():
    g = rate_grid(1.0, 7.0, 0.25)
    assert len(g) == 25
    assert g[0] == 1.0 and g[-1] == 7.0


def test_payoff_curve_shape_and_direction(put_input, call_input):
    put = payoff_curve(put_input)
    assert {"rate", "bond_price", "warrant_value", "position", "pnl"}.issubset(put.columns)
    assert len(put) == 39
    assert np.all(np.diff(put["bond_price"].values) < 0), "bond price falls along the yield grid"
    assert np.all(np.diff(put["pnl"].values) >= 0), "PUT P&L improves as yields rise"

    call = payoff_curve(call_input, rates=[1.0, 3.0, 5.0])
    assert list(call["rate"]) == [1.0, 3.0, 5.0]
    assert np.all(np.diff(call["pnl"].values) <= 0), "CALL P&L worsens as yields rise"


def test_payoff_pnl_net_of_costs(put_input):
    curve = payoff_curve(put_input, rates=[20.0])
    out = run_simulation(put_input)
    row = curve.iloc[0]
    assert row["pnl"] == pytest.approx(row["position"] - out.costs.net_investment)


def test_time_decay_curve(put_input):
    decay = time_decay_curve(put_input)
    assert decay["day"].iloc[0] == 0
    assert decay["day"].iloc[-1] == 365
    assert decay["remaining_days"].iloc[-1] == 0
    last = decay.iloc[-1]
    assert last["warrant_value"] == pytest.approx(last["intrinsic_value"])
    assert last["time_value"] == 0.0
    assert (decay["time_value"] >= 0.0).all()
    assert decay["warrant_value"].iloc[0] > last["warrant_value"]


def test_time_decay_short_contract_has_daily_points(put_input):
    short = replace(put_input, warrant=replace(put_input.warrant, expiry=10 / 365))
    decay = time_decay_curve(short)
    assert list(decay["day"]) == list(range(11))


def test_rate_scenarios_put(put_input):
    per_scenario, summary = run_rate_scenarios(put_input)
    assert per_scenario["scenario"].iloc[0] == "BASE"
    assert per_scenario["adj_pnl_vs_base"].iloc[0] == 0.0
    assert "PAR_+50bp" in set(per_scenario["scenario"])

    shocked = per_scenario.iloc[1:].sort_values("shock_bp")
    assert np.all(np.diff(shocked["adj_pnl"].values) > 0), "PUT gains with every further rate rise"
    assert summary["adj_pnl"].is_monotonic_decreasing
    assert summary["scenario"].iloc[0] == "PAR_+100bp"


def test_compare_scenarios(put_input, call_input):
    grid = compare_scenarios({"put": put_input, "call": call_input}, rates=[1.0, 4.0, 7.0])
    assert list(grid.columns) == ["rate", "put", "call"]
    assert grid["put"].iloc[-1] > grid["put"].iloc[0]
    assert grid["call"].iloc[0] > grid["call"].iloc[-1]

    expected = run_simulation(with_simulated_rate(put_input, 4.0)).adjusted_pnl.profit_loss_percent
    assert grid["put"].iloc[1] == pytest.approx(expected)


def test_credit_spread_helpers():
    assert simulated_rate_from_spread(3.0, 50) == pytest.approx(3.5)
    assert credit_spread_from_rates(3.0, 3.5) == 50
    assert credit_spread_from_rates(3.0, 2.0) == 0


def test_scenario_label(put_input, call_input):
    assert scenario_label(put_input) == "PUT S100 @4.0%"
    assert scenario_label(with_simulated_rate(call_input, 2.25)).startswith("CALL S100 @2.2")
