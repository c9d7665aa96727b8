from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .bonds import price_bond
from .config import DEFAULT_CONFIG, SimulatorConfig
from .costs import costs_from_params, position_value
from .models import SimulatorInput
from .options import bs_value, intrinsic_value
from .simulator import run_simulation
from .utils import index_grid, pct_to_decimal, remaining_time


def rate_grid(start: float, stop: float, step: float) -> np.ndarray:
    """Inclusive yield grid in percent."""
    return np.array(index_grid(start, stop, step), dtype=float)


def with_simulated_rate(inp: SimulatorInput, rate_pct: float) -> SimulatorInput:
    return replace(inp, market=replace(inp.market, simulated_rate=float(rate_pct)))


def simulated_rate_from_spread(risk_free_rate: float, credit_spread_bps: float) -> float:
    """Simulated bond yield as risk-free plus a credit spread quoted in bp."""
    return risk_free_rate + credit_spread_bps / 100.0


def credit_spread_from_rates(risk_free_rate: float, simulated_rate: float) -> int:
    """Inverse of simulated_rate_from_spread, floored at 0 and rounded to whole bp."""
    return max(0, int(round((simulated_rate - risk_free_rate) * 100)))


def scenario_label(inp: SimulatorInput) -> str:
    """Short display name, e.g. 'PUT S100 @4.0%'."""
    kind = "PUT" if inp.warrant.is_put else "CALL"
    return f"{kind} S{inp.warrant.strike:g} @{inp.market.simulated_rate:.1f}%"


def payoff_curve(
    inp: SimulatorInput,
    rates: Optional[Sequence[float]] = None,
    config: Optional[SimulatorConfig] = None,
) -> pd.DataFrame:
    """
    Position value and P&L (net of costs) as a function of the bond yield.

    The warrant is valued with the full remaining life at each yield.
    """
    cfg = config or DEFAULT_CONFIG
    w, b = inp.warrant, inp.bond
    rates = rate_grid(0.5, 10.0, 0.25) if rates is None else np.asarray(rates, dtype=float)

    _, remaining_years = remaining_time(w.expiry, inp.time.elapsed_days, cfg.days_per_year)
    net = costs_from_params(w.premium, w.quantity, w.ratio, inp.costs).net_investment
    r = pct_to_decimal(inp.market.risk_free_rate)

    rows = []
    for rate in rates:
        bond_px = price_bond(b.face_value, pct_to_decimal(b.coupon), pct_to_decimal(rate), b.maturity)
        value = bs_value(bond_px, w.strike, w.volatility, remaining_years, r, w.is_put)
        position = position_value(value, w.quantity, w.ratio)
        rows.append(
            {
                "rate": float(rate),
                "bond_price": bond_px,
                "warrant_value": value,
                "position": position,
                "pnl": position - net,
            }
        )

    return pd.DataFrame(rows)


def time_decay_curve(
    inp: SimulatorInput,
    points: int = 50,
    config: Optional[SimulatorConfig] = None,
) -> pd.DataFrame:
    """
    Warrant value split into intrinsic and time value over the life of the
    contract, at today's bond price. The expiry day is always the last row.
    """
    cfg = config or DEFAULT_CONFIG
    w, b = inp.warrant, inp.bond

    total_days = int(round(w.expiry * cfg.days_per_year))
    bond_px = price_bond(b.face_value, pct_to_decimal(b.coupon), pct_to_decimal(b.current_rate), b.maturity)
    intrinsic = intrinsic_value(bond_px, w.strike, w.is_put)
    r = pct_to_decimal(inp.market.risk_free_rate)

    step = max(1, total_days // max(1, points))
    days = list(range(0, total_days + 1, step))
    if days[-1] != total_days:
        days.append(total_days)

    rows = []
    for day in days:
        remaining_days = total_days - day
        value = bs_value(bond_px, w.strike, w.volatility, remaining_days / cfg.days_per_year, r, w.is_put)
        rows.append(
            {
                "day": day,
                "remaining_days": remaining_days,
                "warrant_value": value,
                "intrinsic_value": intrinsic,
                "time_value": max(0.0, value - intrinsic),
            }
        )

    return pd.DataFrame(rows)


def run_rate_scenarios(
    inp: SimulatorInput,
    shocks_bp: Iterable[float] = (-100, -50, -25, 25, 50, 100),
    config: Optional[SimulatorConfig] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Parallel yield shocks applied to today's yield.

    Returns (per_scenario, summary): per_scenario holds the simulated bond
    price, warrant value and adjusted P&L for each shock; summary ranks the
    shocks by adjusted P&L.
    """
    base = run_simulation(inp, config)

    rows = [
        {
            "scenario": "BASE",
            "shock_bp": 0.0,
            "simulated_rate": inp.market.simulated_rate,
            "bond_price": base.calculations.simulated_bond_price,
            "warrant_value": base.calculations.simulated_warrant_value,
            "position": base.calculations.simulated_position,
            "adj_pnl": base.adjusted_pnl.profit_loss,
        }
    ]
    for bp in shocks_bp:
        rate = inp.bond.current_rate + bp / 100.0
        out = run_simulation(with_simulated_rate(inp, rate), config)
        rows.append(
            {
                "scenario": f"PAR_{bp:+g}bp",
                "shock_bp": float(bp),
                "simulated_rate": rate,
                "bond_price": out.calculations.simulated_bond_price,
                "warrant_value": out.calculations.simulated_warrant_value,
                "position": out.calculations.simulated_position,
                "adj_pnl": out.adjusted_pnl.profit_loss,
            }
        )

    per_scenario = pd.DataFrame(rows)
    per_scenario["adj_pnl_vs_base"] = per_scenario["adj_pnl"] - per_scenario.loc[0, "adj_pnl"]

    summary = (
        per_scenario[["scenario", "shock_bp", "adj_pnl"]]
        .sort_values("adj_pnl", ascending=False)
        .reset_index(drop=True)
    )
    return per_scenario, summary


def compare_scenarios(
    named_inputs: Mapping[str, SimulatorInput],
    rates: Optional[Sequence[float]] = None,
    config: Optional[SimulatorConfig] = None,
) -> pd.DataFrame:
    """
    Adjusted P&L % of several scenarios across a common yield grid.

    One row per rate, one column per scenario name. Percent P&L keeps
    positions of different size comparable.
    """
    rates = rate_grid(1.0, 7.0, 0.25) if rates is None else np.asarray(rates, dtype=float)

    out = pd.DataFrame({"rate": rates})
    for name, inp in named_inputs.items():
        out[name] = [
            run_simulation(with_simulated_rate(inp, rate), config).adjusted_pnl.profit_loss_percent
            for rate in rates
        ]
    return out
