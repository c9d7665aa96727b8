"""
Input and output records of a bond-warrant simulation.

Records are frozen dataclasses with snake_case fields. The dict/JSON form uses
the camelCase keys of the simulator's export format, e.g.

    {"warrant": {"type": "PUT", "strike": 100, ...},
     "bond": {"coupon": 3.0, "maturity": 10, "currentRate": 3.5, "faceValue": 100},
     "market": {"riskFreeRate": 3.0, "simulatedRate": 4.0},
     "costs": {"spreadPercent": 2.0, "commissionPercent": 0.15, "commissionFixed": 5},
     "time": {"elapsedDays": 0}}

All rates in these records are percentages (3.5 = 3.5%); volatility is a decimal.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class SimulationInputError(ValueError):
    """Raised when a serialized scenario does not have the expected shape."""


class WarrantType(str, Enum):
    PUT = "PUT"
    CALL = "CALL"


@dataclass(frozen=True)
class WarrantParams:
    type: WarrantType
    strike: float
    premium: float          # price paid per warrant
    ratio: float            # warrants per unit of underlying
    expiry: float           # years to contractual expiry
    volatility: float       # annualized, decimal
    quantity: int

    @property
    def is_put(self) -> bool:
        return self.type == WarrantType.PUT

    @property
    def units(self) -> float:
        return self.quantity * self.ratio


@dataclass(frozen=True)
class BondParams:
    coupon: float
    maturity: float
    current_rate: float
    face_value: float = 100.0


@dataclass(frozen=True)
class MarketParams:
    risk_free_rate: float
    simulated_rate: float


@dataclass(frozen=True)
class CostParams:
    spread_percent: float = 0.0
    commission_percent: float = 0.0
    commission_fixed: float = 0.0


@dataclass(frozen=True)
class TimeParams:
    elapsed_days: float = 0


@dataclass(frozen=True)
class SimulatorInput:
    warrant: WarrantParams
    bond: BondParams
    market: MarketParams
    costs: CostParams
    time: TimeParams


@dataclass(frozen=True)
class Calculations:
    current_bond_price: float
    simulated_bond_price: float
    current_warrant_value: float
    simulated_warrant_value: float
    intrinsic_value: float
    total_investment: float
    current_position: float
    simulated_position: float
    profit_loss: float
    profit_loss_percent: float
    duration: float
    price_change: float


@dataclass(frozen=True)
class CostsResult:
    spread_cost: float
    commission: float
    total_costs: float
    gross_investment: float
    net_investment: float


@dataclass(frozen=True)
class Greeks:
    delta: float = 0.0
    gamma: float = 0.0
    vega: float = 0.0
    theta: float = 0.0      # per calendar day
    rho: float = 0.0


@dataclass(frozen=True)
class AdjustedPnL:
    total_investment: float
    simulated_position: float
    profit_loss: float
    profit_loss_percent: float


@dataclass(frozen=True)
class SimulatorOutput:
    input: SimulatorInput
    calculations: Calculations
    costs: CostsResult
    greeks: Greeks
    theta: float
    break_even_rate: Optional[float]
    adjusted_pnl: AdjustedPnL
    remaining_days: float
    remaining_years: float
    timestamp: str


# ---------- dict / JSON conversion ----------

_KEY_OVERRIDES = {"adjusted_pnl": "adjustedPnL"}

INPUT_GROUPS = ("warrant", "bond", "market", "costs", "time")


def _camel(name: str) -> str:
    if name in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)


def _record_to_dict(record) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, Enum):
            value = value.value
        out[_camel(f.name)] = value
    return out


def _record_from_dict(cls, data: Mapping[str, Any], group: str):
    if not isinstance(data, Mapping):
        raise SimulationInputError(f"'{group}' must be an object, got {type(data).__name__}")

    kwargs = {}
    for f in fields(cls):
        key = _camel(f.name)
        if key in data:
            kwargs[f.name] = data[key]
        elif f.name in data:
            kwargs[f.name] = data[f.name]
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise SimulationInputError(f"'{group}': {exc}") from exc


def input_to_dict(inp: SimulatorInput) -> Dict[str, Any]:
    return {group: _record_to_dict(getattr(inp, group)) for group in INPUT_GROUPS}


def input_from_dict(data: Mapping[str, Any]) -> SimulatorInput:
    if not isinstance(data, Mapping):
        raise SimulationInputError("scenario input must be an object")

    missing = [g for g in INPUT_GROUPS if g not in data]
    if missing:
        raise SimulationInputError(f"scenario input missing group(s): {', '.join(missing)}")

    warrant = _record_from_dict(WarrantParams, data["warrant"], "warrant")
    raw_type = warrant.type.value if isinstance(warrant.type, WarrantType) else str(warrant.type).upper()
    try:
        warrant_type = WarrantType(raw_type)
    except ValueError as exc:
        raise SimulationInputError(f"'warrant': unknown type {warrant.type!r}") from exc

    return SimulatorInput(
        warrant=replace(warrant, type=warrant_type),
        bond=_record_from_dict(BondParams, data["bond"], "bond"),
        market=_record_from_dict(MarketParams, data["market"], "market"),
        costs=_record_from_dict(CostParams, data["costs"], "costs"),
        time=_record_from_dict(TimeParams, data["time"], "time"),
    )


def output_to_dict(out: SimulatorOutput) -> Dict[str, Any]:
    return {
        "input": input_to_dict(out.input),
        "calculations": _record_to_dict(out.calculations),
        "costs": _record_to_dict(out.costs),
        "greeks": _record_to_dict(out.greeks),
        "theta": out.theta,
        "breakEvenRate": out.break_even_rate,
        "adjustedPnL": _record_to_dict(out.adjusted_pnl),
        "remainingDays": out.remaining_days,
        "remainingYears": out.remaining_years,
        "timestamp": out.timestamp,
    }


def output_from_dict(data: Mapping[str, Any]) -> SimulatorOutput:
    if not isinstance(data, Mapping):
        raise SimulationInputError("simulation output must be an object")
    try:
        return SimulatorOutput(
            input=input_from_dict(data["input"]),
            calculations=_record_from_dict(Calculations, data["calculations"], "calculations"),
            costs=_record_from_dict(CostsResult, data["costs"], "costs"),
            greeks=_record_from_dict(Greeks, data.get("greeks", {}), "greeks"),
            theta=data["theta"],
            break_even_rate=data.get("breakEvenRate"),
            adjusted_pnl=_record_from_dict(AdjustedPnL, data["adjustedPnL"], "adjustedPnL"),
            remaining_days=data["remainingDays"],
            remaining_years=data["remainingYears"],
            timestamp=data["timestamp"],
        )
    except KeyError as exc:
        raise SimulationInputError(f"simulation output missing field {exc}") from exc


def input_to_json(inp: SimulatorInput, indent: Optional[int] = 2) -> str:
    return json.dumps(input_to_dict(inp), indent=indent)


def input_from_json(text: str) -> SimulatorInput:
    return input_from_dict(json.loads(text))


def output_to_json(out: SimulatorOutput, indent: Optional[int] = 2) -> str:
    return json.dumps(output_to_dict(out), indent=indent)


def output_from_json(text: str) -> SimulatorOutput:
    return output_from_dict(json.loads(text))


def validate_input(obj: Any) -> bool:
    """
    Shape check done before handing a scenario to the engine.

    True for a SimulatorInput, or a mapping holding all five parameter groups
    as mappings. Values are not range-checked here.
    """
    if isinstance(obj, SimulatorInput):
        return True
    if not isinstance(obj, Mapping):
        return False
    return all(isinstance(obj.get(g), Mapping) for g in INPUT_GROUPS)
