try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from finflow.schemas import IntentCategory
from finflow.services.intake import (
    IntakeAnswerError,
    initial_values,
    pending_questions,
    questions_for,
)


def _question(category, key):
    return next(q for q in questions_for(category) if q.key == key)


def test_categories_without_questions_use_default_list():
    keys = [q.key for q in questions_for(IntentCategory.DEBT_FREEDOM)]

    assert keys == ["currentAge", "currentSavings", "annualExpenses"]


def test_pending_questions_skip_extracted_values():
    pending = pending_questions(IntentCategory.FIRE, {"currentAge": 29, "annualIncome": 90000})

    assert [q.key for q in pending] == ["currentSavings", "annualExpenses"]


def test_initial_values_keep_extracted_values_and_fill_defaults():
    values = initial_values(IntentCategory.HOME_BUYING, {"annualIncome": 120000, "timeline": 3})

    assert values == {
        "annualIncome": 120000,
        "timeline": 3,
        "currentSavings": 30000,
        "targetAmount": 350000,
    }


def test_question_bounds_are_enforced():
    question = _question(IntentCategory.RETIREMENT, "currentAge")

    assert question.validate(45) == 45
    with pytest.raises(IntakeAnswerError):
        question.validate(17)


def test_formatted_values():
    assert _question(IntentCategory.RETIREMENT, "currentAge").format(42) == "42 years old"
    assert _question(IntentCategory.RETIREMENT, "currentSavings").format(1500000) == "$1.5M"
    assert _question(IntentCategory.RETIREMENT, "monthlySavings").format(1500) == "$1,500/mo"
    assert _question(IntentCategory.RETIREMENT, "annualExpenses").format(55000) == "$55K/year"


def test_responses_depend_on_earlier_answers():
    age = _question(IntentCategory.RETIREMENT, "currentAge")
    assert age.respond(30, {"targetAge": 50}) == "That gives you 20 years to reach your goal"
    assert age.respond(30, {}) == "Got it, 30 years old"

    savings = _question(IntentCategory.FIRE, "currentSavings")
    assert savings.respond(200000, {"annualIncome": 80000}) == "Ahead of the curve"
    assert savings.respond(200000, {}) is None

    expenses = _question(IntentCategory.FIRE, "annualExpenses")
    assert expenses.respond(40000, {"annualIncome": 100000}) == "60% savings rate - incredible"

    price = _question(IntentCategory.HOME_BUYING, "targetAmount")
    assert price.respond(300000, {"currentSavings": 75000}) == "25% down payment - no PMI"
    assert _question(IntentCategory.HOME_BUYING, "annualIncome").respond(90000, {}) is None
