"""Formula library exports."""

from .base import CalculatorInputError, InputField, resolve_inputs, safe_divide
from .catalog import CALCULATOR_CATALOG, CatalogEntry, get_catalog_entry
from .debt import DebtPayoffResult, debt_payoff
from .dispatch import (
    CalculatorDefinition,
    CalculatorKind,
    CalculatorOutcome,
    compute,
    get_definition,
    resolve_kind,
)
from .fire import CoastFireResult, FireNumberResult, coast_fire, fire_number
from .growth import CompoundGrowthResult, SavingsRateResult, compound_growth, savings_rate
from .household import (
    EmergencyFundResult,
    FreelanceRateResult,
    NetWorthResult,
    emergency_fund,
    freelance_rate,
    net_worth,
)
from .housing import (
    HouseAffordabilityResult,
    RentVsBuyResult,
    house_affordability,
    rent_vs_buy,
)

__all__ = [
    "CALCULATOR_CATALOG",
    "CalculatorDefinition",
    "CalculatorInputError",
    "CalculatorKind",
    "CalculatorOutcome",
    "CatalogEntry",
    "CoastFireResult",
    "CompoundGrowthResult",
    "DebtPayoffResult",
    "EmergencyFundResult",
    "FireNumberResult",
    "FreelanceRateResult",
    "HouseAffordabilityResult",
    "InputField",
    "NetWorthResult",
    "RentVsBuyResult",
    "SavingsRateResult",
    "coast_fire",
    "compound_growth",
    "compute",
    "debt_payoff",
    "emergency_fund",
    "fire_number",
    "freelance_rate",
    "get_catalog_entry",
    "get_definition",
    "house_affordability",
    "net_worth",
    "rent_vs_buy",
    "resolve_inputs",
    "resolve_kind",
    "safe_divide",
    "savings_rate",
]
