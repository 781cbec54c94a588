"""Household planning calculators: emergency fund, net worth and freelance rate."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .base import InputField, capped_percent, safe_divide, source


@dataclass(frozen=True, slots=True)
class EmergencyFundResult:
    target_amount: float
    recommended_months: int
    recommended_amount: float
    progress: Optional[float]
    is_funded: bool
    surplus: float
    remaining: float
    months_to_goal: Optional[int]

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "targetAmount": self.target_amount,
            "progress": self.progress,
            "recommendedMonths": self.recommended_months,
            "recommendedAmount": self.recommended_amount,
            "remaining": self.remaining,
            "monthsToGoal": self.months_to_goal,
        }


EMERGENCY_FUND_FIELDS: tuple[InputField, ...] = (
    InputField(
        "monthlyExpenses",
        "Monthly expenses",
        4000,
        1000,
        15000,
        250,
        sources=(source("annualExpenses", 1 / 12), source("monthlyExpenses")),
    ),
    InputField("targetMonths", "Months of coverage", 6, 3, 12, 1),
    InputField("currentSavings", "Current savings", 5000, 0, 100000, 1000),
    InputField("monthlySavings", "Monthly savings", 500, 0, 5000, 100),
    InputField("jobStability", "Job stability (1-5)", 3, 1, 5, 1),
)


def recommended_coverage(job_stability: float) -> int:
    """Months of expenses to hold given job stability on a 1-5 scale."""
    if job_stability <= 2:
        return 8
    if job_stability <= 3:
        return 6
    return 4


def emergency_fund(
    *,
    monthly_expenses: float = 4000,
    target_months: float = 6,
    current_savings: float = 5000,
    monthly_savings: float = 500,
    job_stability: float = 3,
) -> EmergencyFundResult:
    target = monthly_expenses * target_months
    recommended_months = recommended_coverage(job_stability)
    remaining = max(0.0, target - current_savings)
    months_to_goal = (
        math.ceil(remaining / monthly_savings) if monthly_savings > 0 else None
    )
    return EmergencyFundResult(
        target_amount=target,
        recommended_months=recommended_months,
        recommended_amount=monthly_expenses * recommended_months,
        progress=capped_percent(current_savings, target),
        is_funded=current_savings >= target,
        surplus=current_savings - target,
        remaining=remaining,
        months_to_goal=months_to_goal,
    )


@dataclass(frozen=True, slots=True)
class NetWorthResult:
    """Balance sheet totals. Breakdowns only list non-zero categories."""

    total_assets: float
    total_liabilities: float
    net_worth: float
    liquid_assets: float
    illiquid_assets: float
    debt_to_asset_ratio: float
    asset_breakdown: tuple[tuple[str, float], ...]
    liability_breakdown: tuple[tuple[str, float], ...]

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "netWorth": self.net_worth,
            "totalAssets": self.total_assets,
            "totalLiabilities": self.total_liabilities,
            "liquidAssets": self.liquid_assets,
            "illiquidAssets": self.illiquid_assets,
            "debtToAssetRatio": self.debt_to_asset_ratio,
        }


NET_WORTH_FIELDS: tuple[InputField, ...] = (
    InputField("cashSavings", "Cash & savings", 15000, 0, 200000, 1000),
    InputField(
        "investments",
        "Investments",
        50000,
        0,
        2000000,
        5000,
        sources=(source("investments"), source("currentSavings")),
    ),
    InputField("retirement", "Retirement accounts", 75000, 0, 3000000, 5000),
    InputField("homeValue", "Home value", 0, 0, 2000000, 10000),
    InputField("otherAssets", "Other assets", 10000, 0, 500000, 1000),
    InputField("mortgage", "Mortgage", 0, 0, 1500000, 10000),
    InputField("studentLoans", "Student loans", 0, 0, 300000, 1000),
    InputField("carLoan", "Car loan", 0, 0, 100000, 1000),
    InputField("creditCards", "Credit cards", 0, 0, 100000, 500),
    InputField("otherDebts", "Other debts", 0, 0, 500000, 1000),
)


def net_worth(
    *,
    cash_savings: float = 15000,
    investments: float = 50000,
    retirement: float = 75000,
    home_value: float = 0,
    other_assets: float = 10000,
    mortgage: float = 0,
    student_loans: float = 0,
    car_loan: float = 0,
    credit_cards: float = 0,
    other_debts: float = 0,
) -> NetWorthResult:
    assets = (
        ("Cash & Savings", cash_savings),
        ("Investments", investments),
        ("Retirement", retirement),
        ("Home Value", home_value),
        ("Other Assets", other_assets),
    )
    liabilities = (
        ("Mortgage", mortgage),
        ("Student Loans", student_loans),
        ("Car Loan", car_loan),
        ("Credit Cards", credit_cards),
        ("Other Debts", other_debts),
    )
    total_assets = sum(value for _, value in assets)
    total_liabilities = sum(value for _, value in liabilities)
    liquid = cash_savings + investments
    ratio = safe_divide(total_liabilities, total_assets)
    return NetWorthResult(
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        liquid_assets=liquid,
        illiquid_assets=total_assets - liquid,
        debt_to_asset_ratio=ratio * 100 if ratio is not None and total_assets > 0 else 0.0,
        asset_breakdown=tuple(item for item in assets if item[1] > 0),
        liability_breakdown=tuple(item for item in liabilities if item[1] > 0),
    )


@dataclass(frozen=True, slots=True)
class FreelanceRateResult:
    gross_needed: float
    hourly_rate: Optional[float]
    daily_rate: Optional[float]
    weekly_rate: Optional[float]
    monthly_retainer: float
    effective_hourly: Optional[float]
    w2_equivalent: float
    tax_amount: float
    retirement_amount: float
    billable_hours: float

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "hourlyRate": self.hourly_rate,
            "grossNeeded": self.gross_needed,
            "dailyRate": self.daily_rate,
            "weeklyRate": self.weekly_rate,
            "monthlyRetainer": self.monthly_retainer,
            "effectiveHourly": self.effective_hourly,
            "w2Equivalent": self.w2_equivalent,
        }


FREELANCE_RATE_FIELDS: tuple[InputField, ...] = (
    InputField(
        "targetAnnualIncome",
        "Target take-home income",
        100000,
        30000,
        500000,
        5000,
        sources=(source("annualIncome"), source("targetAnnualIncome")),
    ),
    InputField("billableHoursPerWeek", "Billable hours per week", 30, 10, 50, 1),
    InputField("weeksWorkedPerYear", "Weeks worked per year", 48, 40, 52, 1),
    InputField("healthInsurance", "Health insurance (monthly)", 500, 0, 2000, 50),
    InputField("retirementContribution", "Retirement contribution (%)", 15, 0, 25, 1),
    InputField("businessExpenses", "Business expenses (monthly)", 500, 0, 3000, 100),
    InputField("selfEmploymentTax", "Self-employment tax (%)", 15.3, 10, 25, 0.1),
)


def freelance_rate(
    *,
    target_annual_income: float = 100000,
    billable_hours_per_week: float = 30,
    weeks_worked_per_year: float = 48,
    health_insurance: float = 500,
    retirement_contribution: float = 15,
    business_expenses: float = 500,
    self_employment_tax: float = 15.3,
) -> FreelanceRateResult:
    """Hourly rate needed to match a take-home income after overhead."""
    annual_overhead = (health_insurance + business_expenses) * 12
    tax_rate = self_employment_tax / 100
    retirement_rate = retirement_contribution / 100
    gross = safe_divide(
        target_annual_income + annual_overhead, (1 - tax_rate) * (1 - retirement_rate)
    )
    gross_needed = gross if gross is not None else 0.0
    billable_hours = billable_hours_per_week * weeks_worked_per_year
    hourly = safe_divide(gross_needed, billable_hours)
    return FreelanceRateResult(
        gross_needed=gross_needed,
        hourly_rate=hourly,
        daily_rate=hourly * 8 if hourly is not None else None,
        weekly_rate=hourly * billable_hours_per_week if hourly is not None else None,
        monthly_retainer=gross_needed / 12,
        effective_hourly=safe_divide(gross_needed, 40 * weeks_worked_per_year),
        w2_equivalent=target_annual_income * 1.3,
        tax_amount=gross_needed * tax_rate,
        retirement_amount=gross_needed * (1 - tax_rate) * retirement_rate,
        billable_hours=billable_hours,
    )


__all__ = [
    "EMERGENCY_FUND_FIELDS",
    "EmergencyFundResult",
    "FREELANCE_RATE_FIELDS",
    "FreelanceRateResult",
    "NET_WORTH_FIELDS",
    "NetWorthResult",
    "emergency_fund",
    "freelance_rate",
    "net_worth",
    "recommended_coverage",
]
