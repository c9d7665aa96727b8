from __future__ import annotations

import math
from typing import Tuple

from .models import Greeks
from .utils import DAYS_PER_YEAR, norm_cdf, norm_pdf

# Below this total volatility (sigma * sqrt(T)) the option is priced at intrinsic.
MIN_TOTAL_VOL = 1e-12


def intrinsic_value(spot: float, strike: float, is_put: bool) -> float:
    if is_put:
        return max(0.0, strike - spot)
    return max(0.0, spot - strike)


def _is_degenerate(spot: float, strike: float, volatility: float, t: float) -> bool:
    if t <= 0 or volatility <= 0 or spot <= 0 or strike <= 0:
        return True
    return volatility * math.sqrt(t) < MIN_TOTAL_VOL


def _d1_d2(spot: float, strike: float, volatility: float, t: float, r: float) -> Tuple[float, float]:
    vol_sqrt_t = volatility * math.sqrt(t)
    d1 = (math.log(spot / strike) + (r + 0.5 * volatility**2) * t) / vol_sqrt_t
    return d1, d1 - vol_sqrt_t


def bs_value(
    spot: float,
    strike: float,
    volatility: float,
    t: float,
    r: float,
    is_put: bool,
) -> float:
    """
    Black-Scholes value of a European option on the bond price.

    r and volatility are decimals, t in years. At expiry, or with vanishing
    volatility, the value is exactly the intrinsic value.
    """
    if _is_degenerate(spot, strike, volatility, t):
        return intrinsic_value(spot, strike, is_put)

    d1, d2 = _d1_d2(spot, strike, volatility, t, r)
    disc_strike = strike * math.exp(-r * t)

    if is_put:
        value = disc_strike * norm_cdf(-d2) - spot * norm_cdf(-d1)
    else:
        value = spot * norm_cdf(d1) - disc_strike * norm_cdf(d2)

    # rounding can leave a deep OTM value a hair below zero
    return max(0.0, value)


def bs_greeks(
    spot: float,
    strike: float,
    volatility: float,
    t: float,
    r: float,
    is_put: bool,
    days_per_year: int = DAYS_PER_YEAR,
) -> Greeks:
    """
    delta, gamma, vega (per 1.00 of vol), theta (per calendar day), rho (per 1.00 of rate).
    All zero at expiry.
    """
    if _is_degenerate(spot, strike, volatility, t):
        return Greeks()

    sqrt_t = math.sqrt(t)
    d1, d2 = _d1_d2(spot, strike, volatility, t, r)
    pdf_d1 = norm_pdf(d1)
    disc = math.exp(-r * t)

    gamma = pdf_d1 / (spot * volatility * sqrt_t)
    vega = spot * pdf_d1 * sqrt_t
    decay = -spot * pdf_d1 * volatility / (2.0 * sqrt_t)

    if is_put:
        delta = norm_cdf(d1) - 1.0
        theta_annual = decay + r * strike * disc * norm_cdf(-d2)
        rho = -strike * t * disc * norm_cdf(-d2)
    else:
        delta = norm_cdf(d1)
        theta_annual = decay - r * strike * disc * norm_cdf(d2)
        rho = strike * t * disc * norm_cdf(d2)

    return Greeks(
        delta=delta,
        gamma=gamma,
        vega=vega,
        theta=theta_annual / days_per_year,
        rho=rho,
    )


class OptionPricer:
    """Prices one warrant contract (strike, vol, rate, type) for varying spot and time."""

    def __init__(
        self,
        strike: float,
        volatility: float,
        risk_free_rate: float,
        is_put: bool,
        days_per_year: int = DAYS_PER_YEAR,
    ):
        self.strike = strike
        self.volatility = volatility
        self.risk_free_rate = risk_free_rate     # decimal
        self.is_put = is_put
        self.days_per_year = days_per_year

    def value(self, spot: float, t: float) -> float:
        return bs_value(spot, self.strike, self.volatility, t, self.risk_free_rate, self.is_put)

    def greeks(self, spot: float, t: float) -> Greeks:
        return bs_greeks(
            spot, self.strike, self.volatility, t, self.risk_free_rate, self.is_put, self.days_per_year
        )

    def intrinsic(self, spot: float) -> float:
        return intrinsic_value(spot, self.strike, self.is_put)
