"""Debt payoff calculator."""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .base import InputField


@dataclass(frozen=True, slots=True)
class DebtPayoffResult:
    """Amortization outcome for a single balance.

    When the payment does not cover the monthly interest the debt never
    amortizes: ``is_payable`` is false and the payoff figures are ``None``.
    """

    is_payable: bool
    min_payment_needed: Optional[float]
    months_to_payoff: Optional[int]
    total_paid: Optional[float]
    total_interest: Optional[float]
    months_without_extra: Optional[int]
    interest_without_extra: Optional[float]
    interest_saved: Optional[float]
    months_saved: Optional[int]
    payoff_date: Optional[date] = None

    def reported_values(self) -> dict[str, Optional[float]]:
        return {
            "monthsToPayoff": self.months_to_payoff,
            "totalInterest": self.total_interest,
            "totalPaid": self.total_paid,
            "interestSaved": self.interest_saved,
            "monthsSaved": self.months_saved,
            "isPayable": float(self.is_payable),
            "minPaymentNeeded": self.min_payment_needed,
        }


DEBT_PAYOFF_FIELDS: tuple[InputField, ...] = (
    InputField("totalDebt", "Total debt", 25000, 1000, 100000, 1000),
    InputField("interestRate", "Interest rate (APR %)", 18, 0, 30, 0.5),
    InputField("monthlyPayment", "Monthly payment", 500, 50, 5000, 50),
    InputField("extraPayment", "Extra payment", 0, 0, 2000, 50),
)


def months_to_repay(balance: float, monthly_rate: float, payment: float) -> Optional[int]:
    """Months needed to repay ``balance``, or ``None`` if it never amortizes."""
    if balance <= 0:
        return 0
    if payment <= balance * monthly_rate or payment <= 0:
        return None
    if monthly_rate == 0:
        return math.ceil(balance / payment)
    months = -math.log(1 - monthly_rate * balance / payment) / math.log(1 + monthly_rate)
    return math.ceil(months)


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def debt_payoff(
    *,
    total_debt: float = 25000,
    interest_rate: float = 18,
    monthly_payment: float = 500,
    extra_payment: float = 0,
    as_of: Optional[date] = None,
) -> DebtPayoffResult:
    """Months and interest to clear a balance, with and without extra payments."""
    monthly_rate = interest_rate / 100 / 12
    payment = monthly_payment + extra_payment
    min_payment = total_debt * monthly_rate

    months = months_to_repay(total_debt, monthly_rate, payment)
    if months is None:
        return DebtPayoffResult(
            is_payable=False,
            min_payment_needed=math.ceil(min_payment) + 1,
            months_to_payoff=None,
            total_paid=None,
            total_interest=None,
            months_without_extra=None,
            interest_without_extra=None,
            interest_saved=None,
            months_saved=None,
        )

    total_paid = months * payment
    total_interest = total_paid - total_debt

    base_months = months_to_repay(total_debt, monthly_rate, monthly_payment)
    base_interest = (
        base_months * monthly_payment - total_debt if base_months is not None else None
    )
    if extra_payment <= 0:
        interest_saved: Optional[float] = 0.0
        months_saved: Optional[int] = 0
    elif base_months is None or base_interest is None:
        interest_saved = None
        months_saved = None
    else:
        interest_saved = base_interest - total_interest
        months_saved = base_months - months

    return DebtPayoffResult(
        is_payable=True,
        min_payment_needed=None,
        months_to_payoff=months,
        total_paid=total_paid,
        total_interest=total_interest,
        months_without_extra=base_months,
        interest_without_extra=base_interest,
        interest_saved=interest_saved,
        months_saved=months_saved,
        payoff_date=add_months(as_of, months) if as_of is not None else None,
    )


__all__ = [
    "DEBT_PAYOFF_FIELDS",
    "DebtPayoffResult",
    "add_months",
    "debt_payoff",
    "months_to_repay",
]
