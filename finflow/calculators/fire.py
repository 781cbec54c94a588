"""
Financial-independence calculators: FIRE number and coast FIRE.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .base import InputField, capped_percent, safe_divide, source

LEAN_MULTIPLIER = 0.7
FAT_MULTIPLIER = 1.25
MAX_PROJECTION_YEARS = 50
PROJECTION_BUFFER_YEARS = 15


@dataclass(frozen=True, slots=True)
class ProjectionPoint:
    year: int
    balance: float


@dataclass(frozen=True, slots=True)
class FireNumberResult:
    """Outcome of the FIRE number calculation.

    ``None`` marks quantities that are undefined for the inputs, such as a
    zero withdrawal rate or a goal not reached within the projection.
    """

    fire_number: Optional[float]
    lean_fire_number: Optional[float]
    fat_fire_number: Optional[float]
    coast_fire_number: Optional[float]
    net_expenses: float
    additional_annual_income: float
    progress: Optional[float]
    remaining: Optional[float]
    real_return: float
    years_to_fire: Optional[int]
    fire_age: Optional[float]
    monthly_passive_income: Optional[float]
    savings_rate: Optional[float]
    projection: tuple[ProjectionPoint, ...]

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "fireNumber": self.fire_number,
            "leanFireNumber": self.lean_fire_number,
            "fatFireNumber": self.fat_fire_number,
            "coastFireNumber": self.coast_fire_number,
            "monthlyPassiveIncome": self.monthly_passive_income,
            "savingsRate": self.savings_rate,
            "yearsToFire": self.years_to_fire,
            "fireAge": self.fire_age,
            "progress": self.progress,
            "remaining": self.remaining,
        }


FIRE_NUMBER_FIELDS: tuple[InputField, ...] = (
    InputField("annualExpenses", "Annual expenses", 50000, 20000, 200000, 5000),
    InputField("withdrawalRate", "Withdrawal rate (%)", 4, 2.5, 5, 0.1),
    InputField("currentSavings", "Current savings", 100000, 0, 2000000, 25000),
    InputField("monthlySavings", "Monthly savings", 2000, 0, 10000, 250),
    InputField("expectedReturn", "Expected return (%)", 7, 4, 12, 0.5),
    InputField("currentAge", "Current age", 30, 18, 65, 1),
    InputField(
        "targetRetirementAge",
        "Target retirement age",
        55,
        19,
        80,
        1,
        sources=(source("targetAge"), source("targetRetirementAge")),
    ),
    InputField("includeSocialSecurity", "Include Social Security", 0, 0, 1, 1),
    InputField("socialSecurityAmount", "Social Security (monthly)", 2000, 500, 4000, 100),
    InputField("includePension", "Include pension", 0, 0, 1, 1),
    InputField("pensionAmount", "Pension (monthly)", 0, 0, 5000, 100),
    InputField("includeRental", "Include rental income", 0, 0, 1, 1),
    InputField("rentalIncome", "Rental income (monthly)", 0, 0, 10000, 250),
    InputField("inflationRate", "Inflation (%)", 3, 1, 6, 0.5),
    InputField("retirementLifestylePct", "Retirement lifestyle (%)", 100, 50, 150, 5),
    InputField("useInflationAdjusted", "Use inflation-adjusted returns", 1, 0, 1, 1),
)


def fire_number(
    *,
    annual_expenses: float = 50000,
    withdrawal_rate: float = 4,
    current_savings: float = 100000,
    monthly_savings: float = 2000,
    expected_return: float = 7,
    current_age: float = 30,
    target_retirement_age: float = 55,
    include_social_security: float = 0,
    social_security_amount: float = 2000,
    include_pension: float = 0,
    pension_amount: float = 0,
    include_rental: float = 0,
    rental_income: float = 0,
    inflation_rate: float = 3,
    retirement_lifestyle_pct: float = 100,
    use_inflation_adjusted: float = 1,
) -> FireNumberResult:
    """Compute the portfolio needed to retire and the projected path to it."""
    additional_income = 0.0
    if include_social_security:
        additional_income += social_security_amount * 12
    if include_pension:
        additional_income += pension_amount * 12
    if include_rental:
        additional_income += rental_income * 12

    adjusted_expenses = annual_expenses * retirement_lifestyle_pct / 100
    net_expenses = max(0.0, adjusted_expenses - additional_income)

    rate = withdrawal_rate / 100
    target = safe_divide(net_expenses, rate)
    lean = safe_divide(net_expenses * LEAN_MULTIPLIER, rate)
    fat = safe_divide(net_expenses * FAT_MULTIPLIER, rate)

    real_return = (
        expected_return - inflation_rate if use_inflation_adjusted else expected_return
    )
    years_to_target = target_retirement_age - current_age

    projection, years_to_fire = _project_balance(
        current_savings=current_savings,
        monthly_savings=monthly_savings,
        annual_return=real_return,
        goal=target,
        max_years=int(min(MAX_PROJECTION_YEARS, years_to_target + PROJECTION_BUFFER_YEARS)),
    )

    coast = None
    growth_base = 1 + real_return / 100
    if target is not None and growth_base > 0:
        coast = target / growth_base**years_to_target

    savings_rate = safe_divide(monthly_savings * 12, annual_expenses * 1.5)
    return FireNumberResult(
        fire_number=target,
        lean_fire_number=lean,
        fat_fire_number=fat,
        coast_fire_number=coast,
        net_expenses=net_expenses,
        additional_annual_income=additional_income,
        progress=capped_percent(current_savings, target),
        remaining=max(target - current_savings, 0.0) if target is not None else None,
        real_return=real_return,
        years_to_fire=years_to_fire,
        fire_age=current_age + years_to_fire if years_to_fire is not None else None,
        monthly_passive_income=target * rate / 12 if target is not None else None,
        savings_rate=min(savings_rate * 100, 100.0) if savings_rate is not None else None,
        projection=projection,
    )


def _project_balance(
    *,
    current_savings: float,
    monthly_savings: float,
    annual_return: float,
    goal: Optional[float],
    max_years: int,
) -> tuple[tuple[ProjectionPoint, ...], Optional[int]]:
    monthly_return = annual_return / 100 / 12
    balance = current_savings
    points: list[ProjectionPoint] = []
    reached_at: Optional[int] = None
    for year in range(max_years + 1):
        points.append(ProjectionPoint(year=year, balance=balance))
        if reached_at is None and goal is not None and balance >= goal:
            reached_at = year
        for _ in range(12):
            balance = balance * (1 + monthly_return) + monthly_savings
    return tuple(points), reached_at


@dataclass(frozen=True, slots=True)
class CoastFireResult:
    coast_fire_number: Optional[float]
    is_coast_fire: bool
    coast_fire_progress: Optional[float]
    years_to_retirement: float
    years_to_coast_fire: Optional[int]
    coast_fire_age: Optional[float]
    surplus: Optional[float]
    future_value: float

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "coastFireNumber": self.coast_fire_number,
            "isCoastFire": float(self.is_coast_fire),
            "coastFireProgress": self.coast_fire_progress,
            "coastFireAge": self.coast_fire_age,
            "yearsToCoastFire": self.years_to_coast_fire,
            "surplus": self.surplus,
            "yearsToRetirement": self.years_to_retirement,
        }


COAST_FIRE_FIELDS: tuple[InputField, ...] = (
    InputField("currentAge", "Current age", 30, 18, 65, 1),
    InputField(
        "targetRetirementAge",
        "Target retirement age",
        55,
        19,
        75,
        1,
        sources=(source("targetAge"), source("fireAge"), source("targetRetirementAge")),
    ),
    InputField("currentSavings", "Current savings", 100000, 0, 2000000, 25000),
    InputField("fireNumber", "FIRE number", 1250000, 500000, 5000000, 50000),
    InputField("expectedReturn", "Expected return (%)", 7, 4, 12, 0.5),
)


def coast_fire(
    *,
    current_age: float = 30,
    target_retirement_age: float = 55,
    current_savings: float = 100000,
    fire_number: float = 1250000,
    expected_return: float = 7,
) -> CoastFireResult:
    """Determine whether current savings can grow to the FIRE number unaided."""
    years_to_retirement = target_retirement_age - current_age
    growth = 1 + expected_return / 100
    coast_number = fire_number / growth**years_to_retirement if growth > 0 else None

    is_coast = coast_number is not None and current_savings >= coast_number
    future_value = current_savings * growth**years_to_retirement if growth > 0 else 0.0

    years_to_coast: Optional[int] = None
    if is_coast or future_value >= fire_number:
        years_to_coast = 0
    elif coast_number is not None:
        for year in range(1, int(years_to_retirement) + 1):
            remaining_years = years_to_retirement - year
            if current_savings * growth**year >= fire_number / growth**remaining_years:
                years_to_coast = year
                break

    if is_coast:
        coast_age: Optional[float] = current_age
    elif years_to_coast:
        coast_age = current_age + years_to_coast
    else:
        coast_age = None

    return CoastFireResult(
        coast_fire_number=coast_number,
        is_coast_fire=is_coast,
        coast_fire_progress=capped_percent(current_savings, coast_number),
        years_to_retirement=years_to_retirement,
        years_to_coast_fire=years_to_coast,
        coast_fire_age=coast_age,
        surplus=current_savings - coast_number if coast_number is not None else None,
        future_value=future_value,
    )


__all__ = [
    "COAST_FIRE_FIELDS",
    "CoastFireResult",
    "FIRE_NUMBER_FIELDS",
    "FireNumberResult",
    "ProjectionPoint",
    "coast_fire",
    "fire_number",
]
