from __future__ import annotations

from .bonds import price_bond
from .options import OptionPricer
from .utils import DAYS_PER_YEAR


def approx_duration(maturity_years: float, factor: float = 0.85) -> float:
    """Rule-of-thumb modified duration: a fixed fraction of maturity (10Y -> 8.5)."""
    return maturity_years * factor


def price_change_estimate(
    duration: float,
    current_rate_pct: float,
    simulated_rate_pct: float,
    current_price: float,
) -> float:
    """Linear (duration-only) price change for a yield move given in percent."""
    return -duration * (simulated_rate_pct - current_rate_pct) / 100.0 * current_price


def effective_duration(
    face_value: float,
    coupon_rate: float,
    yield_rate: float,
    maturity_years: float,
    bump_bp: float = 1.0,
) -> float:
    """Modified duration from full repricing, central difference in yield (decimals)."""
    h = bump_bp / 10000.0
    base = price_bond(face_value, coupon_rate, yield_rate, maturity_years)
    up = price_bond(face_value, coupon_rate, yield_rate + h, maturity_years)
    down = price_bond(face_value, coupon_rate, yield_rate - h, maturity_years)
    return (down - up) / (2.0 * base * h)


def position_theta(
    pricer: OptionPricer,
    bond_price: float,
    remaining_years: float,
    units: float,
    days_per_year: int = DAYS_PER_YEAR,
) -> float:
    """
    One-day change in position value at a fixed bond price (currency).

    value(T - 1 day) - value(T), remaining life floored at zero.
    """
    value_now = pricer.value(bond_price, remaining_years)
    value_tomorrow = pricer.value(bond_price, max(0.0, remaining_years - 1.0 / days_per_year))
    return (value_tomorrow - value_now) * units
