from __future__ import annotations

from dataclasses import dataclass

from .models import (
    BondParams,
    CostParams,
    MarketParams,
    SimulatorInput,
    TimeParams,
    WarrantParams,
    WarrantType,
)


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Engine settings shared by every simulation run.

    simulated_time_factor scales the remaining life used for the simulated
    warrant valuation only (the simulated snapshot sits partway to expiry);
    theta and break-even always use the full remaining life.
    """
    days_per_year: int = 365
    simulated_time_factor: float = 0.8
    duration_factor: float = 0.85
    break_even_low: float = 0.5         # %
    break_even_high: float = 10.0       # %
    break_even_step: float = 0.01       # percentage points
    refine_break_even: bool = False

    def validate(self) -> None:
        if self.days_per_year <= 0:
            raise ValueError("days_per_year must be positive.")
        if not (0.0 < self.simulated_time_factor <= 1.0):
            raise ValueError("simulated_time_factor must be in (0, 1].")
        if self.duration_factor <= 0:
            raise ValueError("duration_factor must be positive.")
        if self.break_even_step <= 0:
            raise ValueError("break_even_step must be positive.")
        if self.break_even_low >= self.break_even_high:
            raise ValueError("break_even_low must be below break_even_high.")


DEFAULT_CONFIG = SimulatorConfig()


def default_input() -> SimulatorInput:
    """Reference scenario: PUT on a 10Y 3% bond, yields moving 3.5% -> 4.0%."""
    return SimulatorInput(
        warrant=WarrantParams(
            type=WarrantType.PUT,
            strike=100.0,
            premium=2.5,
            ratio=0.1,
            expiry=1.0,
            volatility=0.15,
            quantity=1000,
        ),
        bond=BondParams(coupon=3.0, maturity=10.0, current_rate=3.5, face_value=100.0),
        market=MarketParams(risk_free_rate=3.0, simulated_rate=4.0),
        costs=CostParams(spread_percent=2.0, commission_percent=0.15, commission_fixed=5.0),
        time=TimeParams(elapsed_days=0),
    )
