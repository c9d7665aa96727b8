from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from scipy.optimize import brentq

from .bonds import price_bond
from .options import bs_value
from .utils import index_grid

logger = logging.getLogger(__name__)

PUT_SCAN = (0.5, 10.0)
CALL_SCAN = (10.0, 0.5)


@dataclass(frozen=True)
class BreakEvenContext:
    """Everything needed to value the position at a candidate yield."""
    face_value: float
    coupon_rate: float          # decimal
    maturity_years: float
    strike: float
    volatility: float
    remaining_years: float
    risk_free_rate: float       # decimal
    units: float                # quantity * ratio


def position_at_rate(rate_pct: float, is_put: bool, ctx: BreakEvenContext) -> float:
    bond_price = price_bond(ctx.face_value, ctx.coupon_rate, rate_pct / 100.0, ctx.maturity_years)
    value = bs_value(bond_price, ctx.strike, ctx.volatility, ctx.remaining_years, ctx.risk_free_rate, is_put)
    return value * ctx.units


def find_break_even_rate(
    is_put: bool,
    investment: float,
    ctx: BreakEvenContext,
    start: Optional[float] = None,
    end: Optional[float] = None,
    step: float = 0.01,
    refine: bool = False,
) -> Optional[float]:
    """
    Yield (in %) at which the position is first worth at least `investment`.

    PUT positions gain as yields rise, so the scan runs upward from `start`;
    CALL positions gain as yields fall, so it runs downward. The first
    candidate satisfying position >= investment is returned, or None when the
    scanned range holds no such rate.

    With refine=True the crossing found by the scan is polished with brentq
    between the last failing and first passing candidates.
    """
    default_start, default_end = PUT_SCAN if is_put else CALL_SCAN
    start = default_start if start is None else start
    end = default_end if end is None else end
    signed_step = abs(step) if end >= start else -abs(step)

    prev_rate = None
    for rate in index_grid(start, end, signed_step):
        if position_at_rate(rate, is_put, ctx) >= investment:
            logger.debug("break-even %s found at %.4f%% (investment=%.4f)", "PUT" if is_put else "CALL", rate, investment)
            if refine and prev_rate is not None:
                return _refine(prev_rate, rate, is_put, investment, ctx)
            return rate
        prev_rate = rate

    logger.debug("no break-even in [%s, %s] for investment=%.4f", start, end, investment)
    return None


def _refine(fail_rate: float, pass_rate: float, is_put: bool, investment: float, ctx: BreakEvenContext) -> float:
    def residual(rate_pct: float) -> float:
        return position_at_rate(rate_pct, is_put, ctx) - investment

    lo, hi = sorted((fail_rate, pass_rate))
    if residual(lo) * residual(hi) > 0:
        logger.warning("break-even refinement not bracketed in [%s, %s], keeping scan result", lo, hi)
        return pass_rate

    return float(brentq(residual, lo, hi, xtol=1e-10, maxiter=200))
