"""
Housing calculators: how much home an income supports, and renting versus buying.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .base import InputField, amortized_payment, safe_divide, source

FRONT_END_DTI = 0.28
BACK_END_DTI = 0.43
TAX_INSURANCE_RATE = 0.015
HOME_INSURANCE_RATE = 0.004
MORTGAGE_TERM_YEARS = 30
PRICE_FLOOR = 50000
PRICE_CEILING = 2000000
PRICE_STEP = 5000
PMI_THRESHOLD = 20


@dataclass(frozen=True, slots=True)
class HouseAffordabilityResult:
    max_home_price: float
    conservative_price: float
    aggressive_price: float
    loan_amount: float
    monthly_payment: float
    monthly_pi: float
    monthly_tax_insurance: float
    max_monthly_payment: float
    housing_dti: Optional[float]
    total_dti: Optional[float]
    down_payment_percent: Optional[float]
    needs_pmi: bool

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "maxHomePrice": self.max_home_price,
            "monthlyPayment": self.monthly_payment,
            "conservativePrice": self.conservative_price,
            "aggressivePrice": self.aggressive_price,
            "loanAmount": self.loan_amount,
            "monthlyPI": self.monthly_pi,
            "monthlyTaxInsurance": self.monthly_tax_insurance,
            "housingDTI": self.housing_dti,
            "totalDTI": self.total_dti,
            "downPaymentPercent": self.down_payment_percent,
            "needsPMI": float(self.needs_pmi),
        }


HOUSE_AFFORDABILITY_FIELDS: tuple[InputField, ...] = (
    InputField("annualIncome", "Annual income", 100000, 30000, 500000, 5000),
    InputField("monthlyDebts", "Monthly debts", 500, 0, 5000, 100),
    InputField(
        "downPayment",
        "Down payment",
        50000,
        0,
        500000,
        5000,
        sources=(source("downPayment"), source("currentSavings")),
    ),
    InputField("interestRate", "Interest rate (%)", 6.5, 3, 10, 0.125),
    InputField("loanTerm", "Loan term (years)", 30, 15, 30, 5),
)


def _monthly_housing_cost(
    price: float, down_payment: float, monthly_rate: float, months: int
) -> float:
    principal_interest = amortized_payment(price - down_payment, monthly_rate, months)
    return principal_interest + price * TAX_INSURANCE_RATE / 12


def max_affordable_price(
    *,
    down_payment: float,
    monthly_rate: float,
    months: int,
    max_payment: float,
) -> float:
    """Highest grid price whose housing cost fits ``max_payment``.

    Searches the $5,000 grid between the floor and ceiling prices, ignoring
    prices the down payment already covers. Housing cost grows with price, so
    the affordable prices form a prefix of the grid and a binary search finds
    the same answer as a linear scan.
    """
    steps = (PRICE_CEILING - PRICE_FLOOR) // PRICE_STEP
    low = 0
    while low <= steps and PRICE_FLOOR + low * PRICE_STEP - down_payment <= 0:
        low += 1
    high = steps
    best = 0.0
    while low <= high:
        middle = (low + high) // 2
        price = PRICE_FLOOR + middle * PRICE_STEP
        if _monthly_housing_cost(price, down_payment, monthly_rate, months) <= max_payment:
            best = float(price)
            low = middle + 1
        else:
            high = middle - 1
    return best


def house_affordability(
    *,
    annual_income: float = 100000,
    monthly_debts: float = 500,
    down_payment: float = 50000,
    interest_rate: float = 6.5,
    loan_term: float = 30,
) -> HouseAffordabilityResult:
    """Maximum home price under the 28/43 debt-to-income rules."""
    monthly_income = annual_income / 12
    max_payment = min(
        monthly_income * BACK_END_DTI - monthly_debts, monthly_income * FRONT_END_DTI
    )
    monthly_rate = interest_rate / 100 / 12
    months = int(loan_term * 12)

    home_price = max_affordable_price(
        down_payment=down_payment,
        monthly_rate=monthly_rate,
        months=months,
        max_payment=max_payment,
    )
    loan_amount = max(home_price - down_payment, 0.0)
    monthly_pi = amortized_payment(loan_amount, monthly_rate, months)
    monthly_tax_insurance = home_price * TAX_INSURANCE_RATE / 12
    monthly_payment = monthly_pi + monthly_tax_insurance

    housing_dti = safe_divide(monthly_payment, monthly_income)
    total_dti = safe_divide(monthly_payment + monthly_debts, monthly_income)
    down_ratio = safe_divide(down_payment, home_price)
    down_percent = down_ratio * 100 if down_ratio is not None else None

    return HouseAffordabilityResult(
        max_home_price=home_price,
        conservative_price=home_price * 0.8,
        aggressive_price=home_price * 1.1,
        loan_amount=loan_amount,
        monthly_payment=monthly_payment,
        monthly_pi=monthly_pi,
        monthly_tax_insurance=monthly_tax_insurance,
        max_monthly_payment=max_payment,
        housing_dti=housing_dti * 100 if housing_dti is not None else None,
        total_dti=total_dti * 100 if total_dti is not None else None,
        down_payment_percent=down_percent,
        needs_pmi=down_percent is not None and down_percent < PMI_THRESHOLD,
    )


@dataclass(frozen=True, slots=True)
class RentVsBuyResult:
    monthly_mortgage: float
    total_monthly_owning: float
    total_rent_cost: float
    total_buying_cost: float
    future_home_value: float
    remaining_balance: float
    home_equity: float
    invested_down_payment: float
    invested_savings: float
    buying_wealth: float
    renting_wealth: float
    difference: float
    winner: Literal["buy", "rent"]
    break_even_years: Optional[int]

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "buyingWealth": self.buying_wealth,
            "rentingWealth": self.renting_wealth,
            "difference": self.difference,
            "monthlyMortgage": self.monthly_mortgage,
            "totalMonthlyOwning": self.total_monthly_owning,
            "breakEvenYears": self.break_even_years,
        }


RENT_VS_BUY_FIELDS: tuple[InputField, ...] = (
    InputField(
        "homePrice",
        "Home price",
        400000,
        100000,
        1500000,
        25000,
        sources=(source("homePrice"), source("maxHomePrice")),
    ),
    InputField("downPayment", "Down payment", 80000, 0, 750000, 10000),
    InputField("interestRate", "Interest rate (%)", 6.5, 3, 10, 0.125),
    InputField("propertyTax", "Property tax (%)", 1.2, 0, 3, 0.1),
    InputField("maintenance", "Maintenance (%)", 1, 0, 3, 0.25),
    InputField("homeAppreciation", "Home appreciation (%)", 3, 0, 8, 0.5),
    InputField("monthlyRent", "Monthly rent", 2000, 500, 5000, 100),
    InputField("rentIncrease", "Rent increase (%)", 3, 0, 10, 0.5),
    InputField("yearsToCompare", "Years to compare", 7, 1, 30, 1),
    InputField("investmentReturn", "Investment return (%)", 7, 0, 12, 0.5),
)


def rent_vs_buy(
    *,
    home_price: float = 400000,
    down_payment: float = 80000,
    interest_rate: float = 6.5,
    property_tax: float = 1.2,
    maintenance: float = 1,
    home_appreciation: float = 3,
    monthly_rent: float = 2000,
    rent_increase: float = 3,
    years_to_compare: float = 7,
    investment_return: float = 7,
) -> RentVsBuyResult:
    """Compare wealth after owning a home with renting and investing the difference."""
    years = int(years_to_compare)
    loan_amount = home_price - down_payment
    monthly_rate = interest_rate / 100 / 12
    term_months = MORTGAGE_TERM_YEARS * 12
    monthly_mortgage = amortized_payment(loan_amount, monthly_rate, term_months)

    monthly_other_costs = (
        home_price * (property_tax + maintenance) / 100 + home_price * HOME_INSURANCE_RATE
    ) / 12
    total_monthly_owning = monthly_mortgage + monthly_other_costs

    balance = max(loan_amount, 0.0)
    total_interest = 0.0
    for _ in range(min(years * 12, term_months)):
        interest = balance * monthly_rate
        total_interest += interest
        balance = max(balance - (monthly_mortgage - interest), 0.0)

    total_rent = 0.0
    rent = monthly_rent
    for _ in range(years):
        total_rent += rent * 12
        rent *= 1 + rent_increase / 100

    total_buying_cost = down_payment + total_interest + monthly_other_costs * 12 * years
    future_home_value = home_price * (1 + home_appreciation / 100) ** years
    home_equity = future_home_value - balance

    invested_down = down_payment * (1 + investment_return / 100) ** years
    invested_savings = 0.0
    monthly_return = investment_return / 100 / 12
    rent = monthly_rent
    for _ in range(years):
        monthly_difference = max(0.0, total_monthly_owning - rent)
        for _ in range(12):
            invested_savings = invested_savings * (1 + monthly_return) + monthly_difference
        rent *= 1 + rent_increase / 100

    renting_wealth = invested_down + invested_savings
    difference = home_equity - renting_wealth
    buy_wins = difference > 0
    return RentVsBuyResult(
        monthly_mortgage=monthly_mortgage,
        total_monthly_owning=total_monthly_owning,
        total_rent_cost=total_rent,
        total_buying_cost=total_buying_cost,
        future_home_value=future_home_value,
        remaining_balance=balance,
        home_equity=home_equity,
        invested_down_payment=invested_down,
        invested_savings=invested_savings,
        buying_wealth=home_equity,
        renting_wealth=renting_wealth,
        difference=abs(difference),
        winner="buy" if buy_wins else "rent",
        break_even_years=years if buy_wins else None,
    )


__all__ = [
    "HOUSE_AFFORDABILITY_FIELDS",
    "HouseAffordabilityResult",
    "RENT_VS_BUY_FIELDS",
    "RentVsBuyResult",
    "house_affordability",
    "max_affordable_price",
    "rent_vs_buy",
]
