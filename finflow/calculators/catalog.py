"""Display metadata for calculators, used for labelling only."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    slug: str
    name: str
    short_name: str
    description: str
    category: str


CALCULATOR_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        "fire-number",
        "FIRE Number Calculator",
        "FIRE Number",
        "Calculate how much you need to achieve financial independence",
        "fire_retirement",
    ),
    CatalogEntry(
        "coast-fire",
        "Coast FIRE Calculator",
        "Coast FIRE",
        "Calculate when you can stop actively saving for retirement",
        "fire_retirement",
    ),
    CatalogEntry(
        "fire-date",
        "FIRE Date Calculator",
        "FIRE Date",
        "Calculate when you'll reach financial independence",
        "fire_retirement",
    ),
    CatalogEntry(
        "savings-rate",
        "Savings Rate Calculator",
        "Savings Rate",
        "See how your savings rate shapes your path to independence",
        "fire_retirement",
    ),
    CatalogEntry(
        "freelance-rate",
        "Freelance Rate Calculator",
        "Freelance Rate",
        "Calculate the rate you need to match your salary",
        "career_salary",
    ),
    CatalogEntry(
        "house-affordability",
        "House Affordability Calculator",
        "Affordability",
        "Calculate how much house you can afford",
        "real_estate",
    ),
    CatalogEntry(
        "rent-vs-buy",
        "Rent vs Buy Calculator",
        "Rent vs Buy",
        "Compare the true cost of renting versus buying",
        "real_estate",
    ),
    CatalogEntry(
        "debt-payoff",
        "Debt Payoff Calculator",
        "Debt Payoff",
        "Create a plan to eliminate your debt",
        "debt",
    ),
    CatalogEntry(
        "student-loan",
        "Student Loan Calculator",
        "Student Loans",
        "Optimize your student loan repayment",
        "debt",
    ),
    CatalogEntry(
        "compound-growth",
        "Compound Growth Calculator",
        "Compound Growth",
        "See the power of compound interest over time",
        "investment",
    ),
    CatalogEntry(
        "net-worth-tracker",
        "Net Worth Tracker",
        "Net Worth",
        "Track and visualize your net worth",
        "investment",
    ),
    CatalogEntry(
        "emergency-fund",
        "Emergency Fund Calculator",
        "Emergency Fund",
        "Calculate your ideal emergency fund size",
        "investment",
    ),
)

_BY_SLUG = {entry.slug: entry for entry in CALCULATOR_CATALOG}


def get_catalog_entry(slug: str) -> Optional[CatalogEntry]:
    return _BY_SLUG.get(slug)


__all__ = ["CALCULATOR_CATALOG", "CatalogEntry", "get_catalog_entry"]
