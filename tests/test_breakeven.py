import pytest

from bond_warrant_engine.breakeven import (
    BreakEvenContext,
    find_break_even_rate,
    position_at_rate,
)
from bond_warrant_engine.utils import index_grid


@pytest.fixture(scope="module")
def ctx():
    return BreakEvenContext(
        face_value=100.0,
        coupon_rate=0.03,
        maturity_years=10,
        strike=100.0,
        volatility=0.15,
        remaining_years=1.0,
        risk_free_rate=0.03,
        units=100.0,
    )


def test_put_break_even_is_first_rate_in_upward_scan(ctx):
    investment = 265.0
    rate = find_break_even_rate(True, investment, ctx)
    assert rate is not None and 0.5 < rate < 10.0
    assert position_at_rate(rate, True, ctx) >= investment
    assert position_at_rate(round(rate - 0.01, 10), True, ctx) < investment


def test_call_break_even_is_first_rate_in_downward_scan(ctx):
    investment = 265.0
    rate = find_break_even_rate(False, investment, ctx)
    assert rate is not None and 0.5 < rate < 10.0
    assert position_at_rate(rate, False, ctx) >= investment
    assert position_at_rate(round(rate + 0.01, 10), False, ctx) < investment


def test_put_position_non_decreasing_in_yield(ctx):
    values = [position_at_rate(r, True, ctx) for r in index_grid(0.5, 10.0, 0.25)]
    assert all(b >= a for a, b in zip(values, values[1:]))


def test_returns_none_when_out_of_reach(ctx):
    assert find_break_even_rate(True, 1e9, ctx) is None
    assert find_break_even_rate(False, 1e9, ctx) is None


def test_returns_scan_start_when_already_profitable(ctx):
    assert find_break_even_rate(True, 0.0, ctx) == 0.5
    assert find_break_even_rate(False, 0.0, ctx) == 10.0


def test_custom_scan_bounds(ctx):
    assert find_break_even_rate(True, 265.0, ctx, start=0.5, end=1.0) is None
    full = find_break_even_rate(True, 265.0, ctx)
    assert find_break_even_rate(True, 265.0, ctx, start=full - 0.5, end=full + 0.5) == pytest.approx(full)


def test_refined_rate_lies_inside_scan_step(ctx):
    investment = 265.0
    coarse = find_break_even_rate(True, investment, ctx)
    fine = find_break_even_rate(True, investment, ctx, refine=True)
    assert coarse - 0.01 - 1e-9 <= fine <= coarse + 1e-9
    assert position_at_rate(fine, True, ctx) == pytest.approx(investment, abs=1e-6)
