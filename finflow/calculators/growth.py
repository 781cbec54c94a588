"""Growth calculators: compound growth and savings rate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import InputField, safe_divide, source

SAFE_WITHDRAWAL_RATE = 0.04
MAX_SIMULATION_YEARS = 100


@dataclass(frozen=True, slots=True)
class GrowthYear:
    year: int
    balance: float
    contributions: float
    interest: float


@dataclass(frozen=True, slots=True)
class CompoundGrowthResult:
    future_value: float
    total_contributions: float
    total_interest: float
    interest_percent: Optional[float]
    yearly: tuple[GrowthYear, ...]

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "futureValue": self.future_value,
            "totalContributions": self.total_contributions,
            "totalInterest": self.total_interest,
            "interestPercent": self.interest_percent,
        }


COMPOUND_GROWTH_FIELDS: tuple[InputField, ...] = (
    InputField(
        "initialAmount",
        "Initial amount",
        10000,
        0,
        500000,
        5000,
        sources=(source("currentSavings"), source("initialAmount")),
    ),
    InputField(
        "monthlyContribution",
        "Monthly contribution",
        500,
        0,
        10000,
        100,
        sources=(source("monthlySavings"), source("monthlyContribution")),
    ),
    InputField(
        "annualReturn",
        "Annual return (%)",
        7,
        1,
        15,
        0.5,
        sources=(source("expectedReturn"), source("annualReturn")),
    ),
    InputField(
        "years", "Years", 20, 1, 40, 1, sources=(source("timeline"), source("years"))
    ),
)


def _future_value(principal: float, contribution: float, rate: float, months: int) -> float:
    if rate == 0:
        return principal + contribution * months
    growth = (1 + rate) ** months
    return principal * growth + contribution * (growth - 1) / rate


def compound_growth(
    *,
    initial_amount: float = 10000,
    monthly_contribution: float = 500,
    annual_return: float = 7,
    years: float = 20,
) -> CompoundGrowthResult:
    """Future value of a lump sum plus level monthly contributions."""
    monthly_rate = annual_return / 100 / 12
    whole_years = int(years)

    future_value = _future_value(
        initial_amount, monthly_contribution, monthly_rate, whole_years * 12
    )
    total_contributions = initial_amount + monthly_contribution * whole_years * 12
    total_interest = future_value - total_contributions

    yearly = []
    balance = initial_amount
    for year in range(1, whole_years + 1):
        for _ in range(12):
            balance = balance * (1 + monthly_rate) + monthly_contribution
        contributions = initial_amount + monthly_contribution * year * 12
        yearly.append(
            GrowthYear(
                year=year,
                balance=balance,
                contributions=contributions,
                interest=balance - contributions,
            )
        )

    interest_percent = safe_divide(total_interest, future_value)
    return CompoundGrowthResult(
        future_value=future_value,
        total_contributions=total_contributions,
        total_interest=total_interest,
        interest_percent=interest_percent * 100 if interest_percent is not None else None,
        yearly=tuple(yearly),
    )


@dataclass(frozen=True, slots=True)
class SavingsRateResult:
    savings_rate: Optional[float]
    annual_savings: float
    monthly_savings: float
    fire_number: float
    years_to_fire: Optional[int]
    rating: str

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "savingsRate": (
                max(0.0, self.savings_rate) if self.savings_rate is not None else None
            ),
            "annualSavings": max(0.0, self.annual_savings),
            "monthlySavings": max(0.0, self.monthly_savings),
            "fireNumber": self.fire_number,
            "yearsToFire": self.years_to_fire,
        }


SAVINGS_RATE_FIELDS: tuple[InputField, ...] = (
    InputField("annualIncome", "Annual income", 80000, 20000, 500000, 5000),
    InputField("annualExpenses", "Annual expenses", 50000, 15000, 300000, 5000),
    InputField("currentSavings", "Current savings", 50000, 0, 2000000, 10000),
    InputField("expectedReturn", "Expected return (%)", 7, 4, 12, 0.5),
)

_RATINGS: tuple[tuple[float, str], ...] = (
    (50, "Excellent"),
    (30, "Great"),
    (20, "Good"),
    (10, "Fair"),
)


def rate_savings(savings_rate: Optional[float]) -> str:
    """Qualitative label for a savings rate percentage."""
    if savings_rate is None:
        return "Needs Work"
    for threshold, label in _RATINGS:
        if savings_rate >= threshold:
            return label
    return "Needs Work"


def savings_rate(
    *,
    annual_income: float = 80000,
    annual_expenses: float = 50000,
    current_savings: float = 50000,
    expected_return: float = 7,
) -> SavingsRateResult:
    """Savings rate and the years it implies until financial independence."""
    annual_savings = annual_income - annual_expenses
    ratio = safe_divide(annual_savings, annual_income)
    rate = ratio * 100 if ratio is not None else None
    target = annual_expenses / SAFE_WITHDRAWAL_RATE

    years_to_fire: Optional[int] = None
    if current_savings >= target:
        years_to_fire = 0
    elif annual_savings > 0:
        growth = 1 + expected_return / 100
        balance = current_savings
        years_to_fire = MAX_SIMULATION_YEARS
        for year in range(MAX_SIMULATION_YEARS + 1):
            if balance >= target:
                years_to_fire = year
                break
            balance = balance * growth + annual_savings

    return SavingsRateResult(
        savings_rate=rate,
        annual_savings=annual_savings,
        monthly_savings=annual_savings / 12,
        fire_number=target,
        years_to_fire=years_to_fire,
        rating=rate_savings(rate),
    )


__all__ = [
    "COMPOUND_GROWTH_FIELDS",
    "CompoundGrowthResult",
    "GrowthYear",
    "SAVINGS_RATE_FIELDS",
    "SavingsRateResult",
    "compound_growth",
    "rate_savings",
    "savings_rate",
]
