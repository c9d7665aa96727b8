from __future__ import annotations

from .models import CostParams, CostsResult


def position_value(unit_value: float, quantity: float, ratio: float) -> float:
    """Currency value of `quantity` warrants worth `unit_value` per unit of underlying."""
    return unit_value * quantity * ratio


def compute_costs(
    premium: float,
    quantity: float,
    ratio: float,
    spread_percent: float,
    commission_percent: float,
    commission_fixed: float,
) -> CostsResult:
    """
    Round-trip transaction costs on a warrant purchase.

    Commission is the larger of the fixed fee and the percentage fee, charged
    twice (entry and exit). Spread is charged once on the gross amount.
    """
    for name, v in (
        ("premium", premium),
        ("quantity", quantity),
        ("ratio", ratio),
        ("spread_percent", spread_percent),
        ("commission_percent", commission_percent),
        ("commission_fixed", commission_fixed),
    ):
        if v < 0:
            raise ValueError(f"{name} must be non-negative, got {v!r}")

    gross = position_value(premium, quantity, ratio)
    spread_cost = gross * (spread_percent / 100.0)
    commission = max(commission_fixed, gross * (commission_percent / 100.0)) * 2
    total = spread_cost + commission

    return CostsResult(
        spread_cost=spread_cost,
        commission=commission,
        total_costs=total,
        gross_investment=gross,
        net_investment=gross + total,
    )


def costs_from_params(premium: float, quantity: float, ratio: float, params: CostParams) -> CostsResult:
    return compute_costs(
        premium,
        quantity,
        ratio,
        params.spread_percent,
        params.commission_percent,
        params.commission_fixed,
    )
