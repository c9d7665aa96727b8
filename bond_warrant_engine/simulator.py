from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .bonds import BondPricer
from .breakeven import BreakEvenContext, find_break_even_rate
from .config import DEFAULT_CONFIG, SimulatorConfig
from .costs import costs_from_params, position_value
from .models import AdjustedPnL, Calculations, SimulatorInput, SimulatorOutput
from .options import OptionPricer
from .risk import approx_duration, position_theta, price_change_estimate
from .utils import pct_to_decimal, remaining_time, safe_pct

logger = logging.getLogger(__name__)


def run_simulation(
    inp: SimulatorInput,
    config: Optional[SimulatorConfig] = None,
    now: Optional[datetime] = None,
) -> SimulatorOutput:
    """
    Value a bond-warrant position today and under the simulated yield.

    Deterministic in `inp` and `config`; only `timestamp` depends on the clock
    (pass `now` to pin it).
    """
    cfg = config or DEFAULT_CONFIG
    cfg.validate()
    w, b, m = inp.warrant, inp.bond, inp.market
    units = w.units

    remaining_days, remaining_years = remaining_time(w.expiry, inp.time.elapsed_days, cfg.days_per_year)

    bond_pricer = BondPricer()
    current_bond_price = bond_pricer.price_from_params(b, b.current_rate)
    simulated_bond_price = bond_pricer.price_from_params(b, m.simulated_rate)

    pricer = OptionPricer(w.strike, w.volatility, pct_to_decimal(m.risk_free_rate), w.is_put, cfg.days_per_year)
    current_warrant_value = pricer.value(current_bond_price, remaining_years)
    simulated_warrant_value = pricer.value(simulated_bond_price, remaining_years * cfg.simulated_time_factor)
    intrinsic = pricer.intrinsic(simulated_bond_price)

    costs = costs_from_params(w.premium, w.quantity, w.ratio, inp.costs)
    gross = costs.gross_investment
    current_position = position_value(current_warrant_value, w.quantity, w.ratio)
    simulated_position = position_value(simulated_warrant_value, w.quantity, w.ratio)

    theta = position_theta(pricer, current_bond_price, remaining_years, units, cfg.days_per_year)
    greeks = pricer.greeks(current_bond_price, remaining_years)

    ctx = BreakEvenContext(
        face_value=b.face_value,
        coupon_rate=pct_to_decimal(b.coupon),
        maturity_years=b.maturity,
        strike=w.strike,
        volatility=w.volatility,
        remaining_years=remaining_years,
        risk_free_rate=pct_to_decimal(m.risk_free_rate),
        units=units,
    )
    lo, hi = cfg.break_even_low, cfg.break_even_high
    break_even = find_break_even_rate(
        w.is_put,
        costs.net_investment,
        ctx,
        start=lo if w.is_put else hi,
        end=hi if w.is_put else lo,
        step=cfg.break_even_step,
        refine=cfg.refine_break_even,
    )

    duration = approx_duration(b.maturity, cfg.duration_factor)
    price_change = price_change_estimate(duration, b.current_rate, m.simulated_rate, current_bond_price)

    calculations = Calculations(
        current_bond_price=current_bond_price,
        simulated_bond_price=simulated_bond_price,
        current_warrant_value=current_warrant_value,
        simulated_warrant_value=simulated_warrant_value,
        intrinsic_value=intrinsic,
        total_investment=gross,
        current_position=current_position,
        simulated_position=simulated_position,
        profit_loss=simulated_position - gross,
        profit_loss_percent=safe_pct(simulated_position - gross, gross),
        duration=duration,
        price_change=price_change,
    )

    net = costs.net_investment
    adjusted = AdjustedPnL(
        total_investment=net,
        simulated_position=simulated_position,
        profit_loss=simulated_position - net,
        profit_loss_percent=safe_pct(simulated_position - net, net),
    )

    logger.debug(
        "simulated %s K=%s: bond %.4f -> %.4f, warrant %.4f -> %.4f, adj. P&L %.2f, break-even %s",
        "PUT" if w.is_put else "CALL",
        w.strike,
        current_bond_price,
        simulated_bond_price,
        current_warrant_value,
        simulated_warrant_value,
        adjusted.profit_loss,
        break_even,
    )

    stamp = (now or datetime.now(timezone.utc)).isoformat()

    return SimulatorOutput(
        input=inp,
        calculations=calculations,
        costs=costs,
        greeks=greeks,
        theta=theta,
        break_even_rate=break_even,
        adjusted_pnl=adjusted,
        remaining_days=remaining_days,
        remaining_years=remaining_years,
        timestamp=stamp,
    )


class Simulator:
    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.config.validate()

    def run(self, inp: SimulatorInput) -> SimulatorOutput:
        return run_simulation(inp, self.config)

    def run_many(self, inputs: Iterable[SimulatorInput]) -> List[SimulatorOutput]:
        return [self.run(i) for i in inputs]
