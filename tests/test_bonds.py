import numpy as np
import pytest

from bond_warrant_engine.bonds import (
    Bond,
    BondPricer,
    cashflow_schedule,
    discounted_cashflows,
    price_bond,
)
from bond_warrant_engine.models import BondParams


@pytest.fixture(scope="module")
def bond():
    return Bond(coupon_rate=0.04, maturity_years=10, face=100.0)


def test_known_prices():
    assert abs(price_bond(100, 0.04, 0.05, 10) - 92.28) < 0.01
    assert abs(price_bond(100, 0.0, 0.05, 10) - 61.39) < 0.01, "10Y zero at 5%"
    assert abs(price_bond(100, 0.05, 0.05, 1) - 100.0) < 1e-10


@pytest.mark.parametrize("rate", [0.0, 0.01, 0.03, 0.05, 0.08])
def test_par_bond_prices_at_face(rate):
    assert abs(price_bond(100, rate, rate, 10) - 100.0) < 1e-8


def test_discount_and_premium():
    assert price_bond(100, 0.03, 0.05, 10) < 100.0
    assert price_bond(100, 0.07, 0.04, 10) > 100.0
    assert price_bond(100, 0.03, 0.001, 10) > 120.0


def test_price_strictly_decreasing_in_yield():
    yields = np.linspace(-0.05, 0.20, 101)
    prices = np.array([price_bond(100, 0.03, y, 10) for y in yields])
    assert np.all(np.diff(prices) < 0), "Price must fall as yield rises"
    assert np.all(np.isfinite(prices)) and np.all(prices > 0)


def test_longer_maturity_more_discounted():
    assert price_bond(100, 0.03, 0.05, 2) > price_bond(100, 0.03, 0.05, 20)


def test_fractional_maturity_rounds_up_periods():
    assert price_bond(100, 0.03, 0.04, 9.2) == pytest.approx(price_bond(100, 0.03, 0.04, 10))


def test_degenerate_maturity_returns_face():
    assert price_bond(100, 0.03, 0.05, 0) == 100.0
    assert price_bond(250, 0.03, 0.05, -1) == 250.0


def test_yield_at_or_below_minus_100pct_rejected():
    with pytest.raises(ValueError):
        price_bond(100, 0.03, -1.0, 10)


def test_cashflow_schedule(bond):
    cf = cashflow_schedule(bond)
    assert len(cf) == 10
    assert cf["cashflow"].iloc[0] == pytest.approx(4.0)
    assert cf["cashflow"].iloc[-1] == pytest.approx(104.0)
    assert cashflow_schedule(Bond(0.04, 0.0)).empty


def test_discounted_cashflows_sum_to_price(bond):
    cf = discounted_cashflows(bond, 0.05)
    assert {"period", "cashflow", "df", "pv_cf"}.issubset(cf.columns)
    assert abs(cf["pv_cf"].sum() - price_bond(100, 0.04, 0.05, 10)) < 1e-10


def test_bond_pricer_validation_and_percent_inputs(bond):
    pricer = BondPricer()
    assert pricer.price(bond, 0.05) == pytest.approx(price_bond(100, 0.04, 0.05, 10))

    params = BondParams(coupon=4.0, maturity=10, current_rate=5.0, face_value=100.0)
    assert pricer.price_from_params(params, 5.0) == pytest.approx(pricer.price(bond, 0.05))

    with pytest.raises(ValueError):
        pricer.price(Bond(coupon_rate=0.04, maturity_years=10, face=0.0), 0.05)
    with pytest.raises(ValueError):
        pricer.price(Bond(coupon_rate=-0.01, maturity_years=10), 0.05)
