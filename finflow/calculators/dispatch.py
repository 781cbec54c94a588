"""
Calculator dispatch: one entry point from a calculator kind to its formula.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from .base import InputField, resolve_inputs
from .debt import DEBT_PAYOFF_FIELDS, debt_payoff
from .fire import COAST_FIRE_FIELDS, FIRE_NUMBER_FIELDS, coast_fire, fire_number
from .growth import (
    COMPOUND_GROWTH_FIELDS,
    SAVINGS_RATE_FIELDS,
    compound_growth,
    savings_rate,
)
from .household import (
    EMERGENCY_FUND_FIELDS,
    FREELANCE_RATE_FIELDS,
    NET_WORTH_FIELDS,
    emergency_fund,
    freelance_rate,
    net_worth,
)
from .housing import (
    HOUSE_AFFORDABILITY_FIELDS,
    RENT_VS_BUY_FIELDS,
    house_affordability,
    rent_vs_buy,
)


class CalculatorKind(str, Enum):
    """Implemented calculators, valued by their public identifier."""

    FIRE_NUMBER = "fire-number"
    COAST_FIRE = "coast-fire"
    COMPOUND_GROWTH = "compound-growth"
    DEBT_PAYOFF = "debt-payoff"
    EMERGENCY_FUND = "emergency-fund"
    HOUSE_AFFORDABILITY = "house-affordability"
    RENT_VS_BUY = "rent-vs-buy"
    SAVINGS_RATE = "savings-rate"
    FREELANCE_RATE = "freelance-rate"
    NET_WORTH = "net-worth-tracker"


@dataclass(frozen=True, slots=True)
class CalculatorDefinition:
    kind: CalculatorKind
    fields: tuple[InputField, ...]
    formula: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class CalculatorOutcome:
    """A computed calculator with the flat values it reports downstream."""

    kind: CalculatorKind
    inputs: dict[str, float]
    result: Any
    reported: dict[str, float]


_DEFINITIONS: dict[CalculatorKind, CalculatorDefinition] = {
    definition.kind: definition
    for definition in (
        CalculatorDefinition(CalculatorKind.FIRE_NUMBER, FIRE_NUMBER_FIELDS, fire_number),
        CalculatorDefinition(CalculatorKind.COAST_FIRE, COAST_FIRE_FIELDS, coast_fire),
        CalculatorDefinition(
            CalculatorKind.COMPOUND_GROWTH, COMPOUND_GROWTH_FIELDS, compound_growth
        ),
        CalculatorDefinition(CalculatorKind.DEBT_PAYOFF, DEBT_PAYOFF_FIELDS, debt_payoff),
        CalculatorDefinition(
            CalculatorKind.EMERGENCY_FUND, EMERGENCY_FUND_FIELDS, emergency_fund
        ),
        CalculatorDefinition(
            CalculatorKind.HOUSE_AFFORDABILITY,
            HOUSE_AFFORDABILITY_FIELDS,
            house_affordability,
        ),
        CalculatorDefinition(CalculatorKind.RENT_VS_BUY, RENT_VS_BUY_FIELDS, rent_vs_buy),
        CalculatorDefinition(CalculatorKind.SAVINGS_RATE, SAVINGS_RATE_FIELDS, savings_rate),
        CalculatorDefinition(
            CalculatorKind.FREELANCE_RATE, FREELANCE_RATE_FIELDS, freelance_rate
        ),
        CalculatorDefinition(CalculatorKind.NET_WORTH, NET_WORTH_FIELDS, net_worth),
    )
}

# Identifiers used by guided flows that name an implemented calculator differently.
_ALIASES: dict[str, CalculatorKind] = {
    "home-affordability": CalculatorKind.HOUSE_AFFORDABILITY,
    "net-worth": CalculatorKind.NET_WORTH,
}


def resolve_kind(calculator_id: str) -> Optional[CalculatorKind]:
    """Map a calculator identifier to its kind, or ``None`` if not implemented."""
    if calculator_id in _ALIASES:
        return _ALIASES[calculator_id]
    try:
        return CalculatorKind(calculator_id)
    except ValueError:
        return None


def get_definition(kind: CalculatorKind) -> CalculatorDefinition:
    return _DEFINITIONS[kind]


def compute(
    kind: CalculatorKind,
    prefill: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CalculatorOutcome:
    """
    Resolve inputs for ``kind`` and run its formula.

    The reported map lists the defined outputs first, followed by the
    resolved inputs, so later steps can prefill from either.
    """
    definition = _DEFINITIONS[kind]
    inputs = resolve_inputs(definition.fields, prefill, overrides)
    result = definition.formula(
        **{field.param: inputs[field.key] for field in definition.fields}
    )
    reported = {
        key: float(value)
        for key, value in result.reported_values().items()
        if value is not None
    }
    for key, value in inputs.items():
        reported.setdefault(key, value)
    return CalculatorOutcome(kind=kind, inputs=inputs, result=result, reported=reported)


__all__ = [
    "CalculatorDefinition",
    "CalculatorKind",
    "CalculatorOutcome",
    "compute",
    "get_definition",
    "resolve_kind",
]
