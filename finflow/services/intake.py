"""
Intake questions asked before a guided flow's calculators.

Each intent category has a short list of bounded numeric questions. Values
already extracted from the user's query are not asked again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from finflow.schemas import IntentCategory

Formatter = Callable[[float], str]
Responder = Callable[[float, Mapping[str, float]], str]


class IntakeAnswerError(ValueError):
    """Raised when an intake answer is outside the question bounds."""


@dataclass(frozen=True, slots=True)
class IntakeQuestion:
    key: str
    question: str
    min: float
    max: float
    step: float
    default: float
    format: Formatter
    subtext: Optional[str] = None
    response: Optional[Responder] = None

    def validate(self, value: float) -> float:
        if not self.min <= value <= self.max:
            raise IntakeAnswerError(
                f"Answer for '{self.key}' must be between {_number(self.min)} "
                f"and {_number(self.max)}."
            )
        return value

    def respond(self, value: float, values: Mapping[str, float]) -> Optional[str]:
        """Short acknowledgement for an answer, or ``None`` when there is none."""
        if self.response is None:
            return None
        return self.response(value, values) or None


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _years_old(value: float) -> str:
    return f"{_number(value)} years old"


def _thousands(value: float) -> str:
    return f"${value / 1000:.0f}K"


def _compact_money(value: float) -> str:
    if value >= 1000000:
        return f"${value / 1000000:.1f}M"
    return _thousands(value)


def _per_year(value: float) -> str:
    return f"{_thousands(value)}/year"


def _per_month(value: float) -> str:
    return f"${value:,.0f}/mo"


def _retirement_age_response(value: float, values: Mapping[str, float]) -> str:
    target_age = values.get("targetAge")
    if target_age:
        return f"That gives you {_number(target_age - value)} years to reach your goal"
    return f"Got it, {_number(value)} years old"


def _savings_ratio_response(value: float, values: Mapping[str, float]) -> str:
    income = values.get("annualIncome")
    if not income:
        return ""
    ratio = value / income
    if ratio >= 2:
        return "Ahead of the curve"
    if ratio >= 1:
        return "On track"
    return "Building momentum"


def _savings_rate_response(value: float, values: Mapping[str, float]) -> str:
    income = values.get("annualIncome")
    if not income:
        return ""
    rate = (income - value) / income * 100
    if rate >= 50:
        return f"{rate:.0f}% savings rate - incredible"
    if rate >= 30:
        return f"{rate:.0f}% savings rate - solid"
    return f"{rate:.0f}% savings rate"


def _down_payment_response(value: float, values: Mapping[str, float]) -> str:
    savings = values.get("currentSavings")
    if not savings:
        return ""
    percent = savings / value * 100
    if percent >= 20:
        return f"{percent:.0f}% down payment - no PMI"
    return f"{percent:.0f}% down payment saved"


def _tiered(*tiers: tuple[Callable[[float], bool], str], fallback: str) -> Responder:
    def respond(value: float, _values: Mapping[str, float]) -> str:
        for predicate, message in tiers:
            if predicate(value):
                return message
        return fallback

    return respond


_QUESTIONS: dict[str, tuple[IntakeQuestion, ...]] = {
    IntentCategory.RETIREMENT.value: (
        IntakeQuestion(
            key="currentAge",
            question="How old are you now?",
            min=18,
            max=70,
            step=1,
            default=30,
            format=_years_old,
            response=_retirement_age_response,
        ),
        IntakeQuestion(
            key="currentSavings",
            question="What have you saved so far?",
            subtext="Include retirement accounts, investments, savings",
            min=0,
            max=2000000,
            step=10000,
            default=50000,
            format=_compact_money,
            response=_tiered(
                (lambda v: v > 100000, "Solid foundation"),
                (lambda v: v > 0, "Every dollar counts"),
                fallback="Starting fresh - that's okay",
            ),
        ),
        IntakeQuestion(
            key="monthlySavings",
            question="How much can you save each month?",
            subtext="What you put toward retirement/investments",
            min=0,
            max=10000,
            step=250,
            default=1500,
            format=_per_month,
            response=_tiered(
                (lambda v: v >= 3000, "Impressive commitment"),
                (lambda v: v >= 1000, "Consistent saving wins"),
                fallback="We'll work with what you have",
            ),
        ),
        IntakeQuestion(
            key="annualExpenses",
            question="What are your yearly expenses?",
            subtext="Rough estimate of your annual spending",
            min=20000,
            max=200000,
            step=5000,
            default=50000,
            format=_per_year,
            response=_tiered(
                (lambda v: v <= 40000, "Lean lifestyle - that helps"),
                (lambda v: v <= 80000, "Pretty typical"),
                fallback="Higher expenses means a bigger target",
            ),
        ),
    ),
    IntentCategory.FIRE.value: (
        IntakeQuestion(
            key="currentAge",
            question="What's your current age?",
            min=18,
            max=60,
            step=1,
            default=28,
            format=_number,
            response=_tiered(
                (lambda v: v < 30, "Time is your biggest asset"),
                (lambda v: v < 40, "Still plenty of runway"),
                fallback="It's never too late to start",
            ),
        ),
        IntakeQuestion(
            key="annualIncome",
            question="What's your annual income?",
            subtext="Gross income before taxes",
            min=30000,
            max=500000,
            step=10000,
            default=80000,
            format=_thousands,
        ),
        IntakeQuestion(
            key="currentSavings",
            question="Current invested assets?",
            subtext="401k, IRA, brokerage, etc.",
            min=0,
            max=2000000,
            step=10000,
            default=75000,
            format=_compact_money,
            response=_savings_ratio_response,
        ),
        IntakeQuestion(
            key="annualExpenses",
            question="Annual spending?",
            subtext="This determines your FIRE number",
            min=20000,
            max=200000,
            step=5000,
            default=45000,
            format=_per_year,
            response=_savings_rate_response,
        ),
    ),
    IntentCategory.HOME_BUYING.value: (
        IntakeQuestion(
            key="annualIncome",
            question="What's your household income?",
            min=30000,
            max=500000,
            step=10000,
            default=85000,
            format=_per_year,
        ),
        IntakeQuestion(
            key="currentSavings",
            question="How much have you saved for a down payment?",
            min=0,
            max=500000,
            step=5000,
            default=30000,
            format=_thousands,
            response=_tiered(
                (lambda v: v >= 100000, "Strong down payment ready"),
                (lambda v: v >= 50000, "Good progress"),
                fallback="Building up",
            ),
        ),
        IntakeQuestion(
            key="targetAmount",
            question="What home price are you considering?",
            min=100000,
            max=1500000,
            step=25000,
            default=350000,
            format=_thousands,
            response=_down_payment_response,
        ),
    ),
    "default": (
        IntakeQuestion(
            key="currentAge",
            question="How old are you?",
            min=18,
            max=70,
            step=1,
            default=30,
            format=_number,
        ),
        IntakeQuestion(
            key="currentSavings",
            question="Current savings & investments?",
            min=0,
            max=2000000,
            step=10000,
            default=50000,
            format=_compact_money,
        ),
        IntakeQuestion(
            key="annualExpenses",
            question="Annual expenses?",
            min=20000,
            max=200000,
            step=5000,
            default=50000,
            format=_per_year,
        ),
    ),
}


def questions_for(category: IntentCategory | str) -> tuple[IntakeQuestion, ...]:
    """Full question list for a category, falling back to the default list."""
    key = category.value if isinstance(category, IntentCategory) else category
    return _QUESTIONS.get(key, _QUESTIONS["default"])


def pending_questions(
    category: IntentCategory | str, extracted: Mapping[str, float]
) -> tuple[IntakeQuestion, ...]:
    """Questions still to ask once extracted values are accounted for."""
    return tuple(
        question
        for question in questions_for(category)
        if extracted.get(question.key) is None
    )


def initial_values(
    category: IntentCategory | str, extracted: Mapping[str, float]
) -> dict[str, float]:
    """Every extracted value plus the default of each unanswered question."""
    values = {key: float(value) for key, value in extracted.items() if value is not None}
    for question in questions_for(category):
        values.setdefault(question.key, float(question.default))
    return values


__all__ = [
    "IntakeAnswerError",
    "IntakeQuestion",
    "initial_values",
    "pending_questions",
    "questions_for",
]
