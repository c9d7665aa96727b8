from __future__ import annotations

import math
from typing import List, Union

import numpy as np
from scipy.special import erfc

ArrayLike = Union[float, np.ndarray]

DAYS_PER_YEAR = 365
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_pdf(x: ArrayLike) -> ArrayLike:
    """Standard normal density."""
    if np.ndim(x) == 0:
        x = float(x)
        return _INV_SQRT_2PI * math.exp(-0.5 * x * x)
    x = np.asarray(x, dtype=float)
    return _INV_SQRT_2PI * np.exp(-0.5 * x * x)


def norm_cdf(x: ArrayLike) -> ArrayLike:
    """
    Standard normal cumulative probability.

    Evaluated as 0.5 * erfc(-x / sqrt(2)), which keeps full relative precision
    in both tails (no 1 - N(x) cancellation) and saturates to exactly 0 or 1
    far outside [-8, 8].
    """
    if np.ndim(x) == 0:
        return float(0.5 * erfc(-float(x) / math.sqrt(2.0)))
    x = np.asarray(x, dtype=float)
    return 0.5 * erfc(-x / np.sqrt(2.0))


def pct_to_decimal(rate_pct: float) -> float:
    return float(rate_pct) / 100.0


def remaining_time(expiry_years: float, elapsed_days: float, days_per_year: int = DAYS_PER_YEAR):
    """
    Days and years left to warrant expiry after elapsed_days.

    Contract life is rounded to whole days first; elapsed_days is subtracted as
    given (fractional days allowed) and the remainder is floored at 0.
    Returns (remaining_days, remaining_years).
    """
    total_days = int(round(expiry_years * days_per_year))
    remaining_days = max(0, total_days - elapsed_days)
    return remaining_days, remaining_days / float(days_per_year)


def safe_pct(numerator: float, denominator: float) -> float:
    """numerator / denominator in percent; 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return 100.0 * numerator / denominator


def index_grid(start: float, stop: float, step: float, decimals: int = 10) -> List[float]:
    """
    Inclusive grid start, start+step, ... up to stop (or down to stop for step < 0).

    Points are built from an integer index so the grid has no accumulation drift.
    """
    if step == 0:
        raise ValueError("step must be non-zero")
    if (stop - start) * step < 0:
        return []
    n = int(math.floor((stop - start) / step + 1e-9))
    return [round(start + i * step, decimals) for i in range(n + 1)]
