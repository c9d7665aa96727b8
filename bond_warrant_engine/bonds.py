from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .models import BondParams
from .utils import pct_to_decimal


@dataclass(frozen=True)
class Bond:
    coupon_rate: float      # decimal, e.g. 0.03 = 3%
    maturity_years: float
    face: float = 100.0


def cashflow_schedule(bond: Bond) -> pd.DataFrame:
    """
    Annual cashflows: coupon face*c at t=1..n, face added at t=n, n=ceil(maturity).
    Empty frame for maturity <= 0.
    """
    n = int(math.ceil(bond.maturity_years)) if bond.maturity_years > 0 else 0

    periods = np.arange(1, n + 1, dtype=float)
    cfs = np.full(n, bond.face * bond.coupon_rate, dtype=float)
    if n > 0:
        cfs[-1] += bond.face

    return pd.DataFrame({"period": periods, "cashflow": cfs})


def discounted_cashflows(bond: Bond, yield_rate: float) -> pd.DataFrame:
    """Cashflow schedule with annual-compounding discount factors and PVs."""
    cf = cashflow_schedule(bond)
    cf["df"] = (1.0 + yield_rate) ** (-cf["period"])
    cf["pv_cf"] = cf["cashflow"] * cf["df"]
    return cf


def price_bond(face_value: float, coupon_rate: float, yield_rate: float, maturity_years: float) -> float:
    """
    Present value of a fixed annual-coupon bond at a flat yield, annual compounding:
      P = sum_t c*F/(1+y)^t + F/(1+y)^n
    Rates are decimals. A bond with no remaining life is worth its face value.
    """
    if maturity_years <= 0:
        return float(face_value)

    if yield_rate <= -1.0:
        raise ValueError(f"yield_rate must be > -100%, got {yield_rate!r}")

    n = int(math.ceil(maturity_years))
    t = np.arange(1, n + 1, dtype=float)

    cfs = np.full(n, face_value * coupon_rate, dtype=float)
    cfs[-1] += face_value

    dfs = (1.0 + yield_rate) ** (-t)
    return float(np.sum(cfs * dfs))


class BondPricer:
    def validate(self, bond: Bond) -> None:
        if not bond.face > 0:
            raise ValueError(f"face must be positive, got {bond.face!r}")
        if not bond.coupon_rate >= 0:
            raise ValueError(f"coupon_rate must be non-negative, got {bond.coupon_rate!r}")
        if math.isnan(bond.maturity_years):
            raise ValueError("maturity_years is NaN")

    def price(self, bond: Bond, yield_rate: float) -> float:
        self.validate(bond)
        return price_bond(bond.face, bond.coupon_rate, yield_rate, bond.maturity_years)

    def price_from_params(self, params: BondParams, rate_pct: float) -> float:
        """Price a bond described in percent terms (coupon and yield in %)."""
        bond = Bond(
            coupon_rate=pct_to_decimal(params.coupon),
            maturity_years=params.maturity,
            face=params.face_value,
        )
        return self.price(bond, pct_to_decimal(rate_pct))
