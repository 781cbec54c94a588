"""
Rule-based classification of free-text planning queries.

Categories come from an ordered keyword table: the first entry whose keyword
appears anywhere in the lowercased query wins. Numbers are pulled out with a
handful of regular expressions.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from finflow.schemas import ExtractedValues, IntentCategory, IntentContext, ParsedIntent
from finflow.services.flow_registry import get_flow_for_intent


class IntentQueryError(ValueError):
    """Raised when a query is missing, not text, or blank."""


class IntentClassificationError(RuntimeError):
    """Raised when a query could not be classified."""


BASE_CONFIDENCE = 0.5
KEYWORD_CONFIDENCE = 0.8
EXTRACTION_BOOST = 0.1
MAX_CONFIDENCE = 0.95
MONTHLY_SAVINGS_CEILING = 20000
UNLABELLED_SAVINGS_FLOOR = 100000

KEYWORD_TABLE: tuple[tuple[str, IntentCategory], ...] = (
    ("retire", IntentCategory.RETIREMENT),
    ("retirement", IntentCategory.RETIREMENT),
    ("stop working", IntentCategory.RETIREMENT),
    ("quit my job", IntentCategory.RETIREMENT),
    ("leave workforce", IntentCategory.RETIREMENT),
    ("fire", IntentCategory.FIRE),
    ("financial independence", IntentCategory.FIRE),
    ("financially independent", IntentCategory.FIRE),
    ("early retirement", IntentCategory.FIRE),
    ("retire early", IntentCategory.FIRE),
    ("house", IntentCategory.HOME_BUYING),
    ("home", IntentCategory.HOME_BUYING),
    ("buy a house", IntentCategory.HOME_BUYING),
    ("mortgage", IntentCategory.HOME_BUYING),
    ("down payment", IntentCategory.HOME_BUYING),
    ("first home", IntentCategory.HOME_BUYING),
    ("career", IntentCategory.CAREER_CHANGE),
    ("job change", IntentCategory.CAREER_CHANGE),
    ("switch careers", IntentCategory.CAREER_CHANGE),
    ("new job", IntentCategory.CAREER_CHANGE),
    ("career change", IntentCategory.CAREER_CHANGE),
    ("quit job", IntentCategory.CAREER_CHANGE),
    ("debt", IntentCategory.DEBT_FREEDOM),
    ("pay off", IntentCategory.DEBT_FREEDOM),
    ("debt free", IntentCategory.DEBT_FREEDOM),
    ("loans", IntentCategory.DEBT_FREEDOM),
    ("credit card", IntentCategory.DEBT_FREEDOM),
    ("college", IntentCategory.EDUCATION),
    ("university", IntentCategory.EDUCATION),
    ("education", IntentCategory.EDUCATION),
    ("degree", IntentCategory.EDUCATION),
    ("student loan", IntentCategory.EDUCATION),
    ("masters", IntentCategory.EDUCATION),
    ("mba", IntentCategory.EDUCATION),
    ("invest", IntentCategory.INVESTMENT),
    ("investing", IntentCategory.INVESTMENT),
    ("grow money", IntentCategory.INVESTMENT),
    ("compound", IntentCategory.INVESTMENT),
    ("portfolio", IntentCategory.INVESTMENT),
    ("emergency", IntentCategory.EMERGENCY_FUND),
    ("emergency fund", IntentCategory.EMERGENCY_FUND),
    ("safety net", IntentCategory.EMERGENCY_FUND),
    ("rainy day", IntentCategory.EMERGENCY_FUND),
)

_AGE_PATTERNS = (
    re.compile(r"(?:i'm|i am|age|aged)\s*(\d{2})"),
    re.compile(r"(\d{2})\s*years?\s*old"),
)
_TARGET_AGE_PATTERNS = (
    re.compile(r"(?:by|at|before)\s*(?:age\s*)?(\d{2})"),
    re.compile(r"retire\s*(?:at|by)\s*(\d{2})"),
)
_TIMELINE_PATTERNS = (
    re.compile(r"(?:in|within|next)\s*(\d+)\s*years?"),
    re.compile(r"(\d+)\s*years?\s*(?:plan|goal|timeline)"),
)
_MONEY_PATTERN = re.compile(r"\$?([\d,.]+)\s*(k|m|million|thousand)?")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_SUFFIX_MULTIPLIERS = {
    "k": 1000,
    "thousand": 1000,
    "m": 1000000,
    "million": 1000000,
}

_URGENT_WORDS = ("urgent", "asap", "soon")
_PLANNING_WORDS = ("plan", "goal")
_ANXIOUS_WORDS = ("worried", "anxious", "stressed")
_OPTIMISTIC_WORDS = ("excited", "ready")


def validate_query(query: Any) -> str:
    """Return ``query`` if it is usable text, else raise ``IntentQueryError``."""
    if not isinstance(query, str) or not query.strip():
        raise IntentQueryError("Query is required")
    return query


def match_category(query: str) -> Optional[IntentCategory]:
    """First category in table order whose keyword occurs in ``query``."""
    lowered = query.lower()
    for keyword, category in KEYWORD_TABLE:
        if keyword in lowered:
            return category
    return None


def _first_group(patterns: tuple[re.Pattern[str], ...], text: str) -> Optional[int]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def _parse_amount(digits: str, suffix: Optional[str]) -> Optional[float]:
    match = _LEADING_NUMBER.match(digits.replace(",", ""))
    if not match:
        return None
    amount = float(match.group(0))
    if suffix:
        amount *= _SUFFIX_MULTIPLIERS[suffix]
    return amount


def extract_values(query: str) -> ExtractedValues:
    """
    Pull ages, money amounts and a timeline out of ``query``.

    Every money amount is routed by keywords found anywhere in the query, so
    when several amounts route to the same field the last one wins.
    """
    lowered = query.lower()
    values: dict[str, Any] = {
        "current_age": _first_group(_AGE_PATTERNS, lowered),
        "target_age": _first_group(_TARGET_AGE_PATTERNS, lowered),
        "timeline": _first_group(_TIMELINE_PATTERNS, lowered),
    }

    mentions_saving = "save" in lowered or "saving" in lowered
    mentions_spending = "expense" in lowered or "spend" in lowered
    mentions_income = any(word in lowered for word in ("income", "salary", "earn"))

    for match in _MONEY_PATTERN.finditer(lowered):
        amount = _parse_amount(match.group(1), match.group(2))
        if amount is None:
            continue
        if mentions_saving:
            if amount < MONTHLY_SAVINGS_CEILING:
                values["monthly_savings"] = amount
            else:
                values["current_savings"] = amount
        elif mentions_spending:
            values["annual_expenses"] = amount
        elif mentions_income:
            values["annual_income"] = amount
        elif amount >= UNLABELLED_SAVINGS_FLOOR:
            values["current_savings"] = amount

    return ExtractedValues(**{key: value for key, value in values.items() if value is not None})


def describe_context(query: str) -> IntentContext:
    lowered = query.lower()
    if any(word in lowered for word in _URGENT_WORDS):
        urgency = "urgent"
    elif any(word in lowered for word in _PLANNING_WORDS):
        urgency = "planning"
    else:
        urgency = "exploring"

    if any(word in lowered for word in _ANXIOUS_WORDS):
        sentiment = "anxious"
    elif any(word in lowered for word in _OPTIMISTIC_WORDS):
        sentiment = "optimistic"
    else:
        sentiment = "curious"
    return IntentContext(urgency=urgency, sentiment=sentiment)


def intro_message(category: IntentCategory, values: ExtractedValues) -> str:
    """Personalised opening line for a flow."""
    if category is IntentCategory.RETIREMENT:
        if values.target_age:
            return (
                f"Let's map out your path to retirement by {values.target_age}. "
                "We'll start by calculating your target number."
            )
        return (
            "Let's figure out what retirement looks like for you. "
            "We'll calculate your FIRE number first."
        )
    if category is IntentCategory.FIRE:
        if values.current_age:
            return (
                f"Great goal! At {values.current_age}, you have time on your side. "
                "Let's calculate your path to financial independence."
            )
        return (
            "Financial independence is within reach. "
            "Let's calculate your FIRE number and build your roadmap."
        )
    return _STATIC_INTROS.get(category) or get_flow_for_intent(category).description


_STATIC_INTROS: dict[IntentCategory, str] = {
    IntentCategory.HOME_BUYING: (
        "Buying a home is a big step. "
        "Let's figure out what you can afford and create a plan to get there."
    ),
    IntentCategory.CAREER_CHANGE: (
        "Thinking about a career change takes courage. "
        "Let's make sure you're financially prepared for the transition."
    ),
    IntentCategory.DEBT_FREEDOM: (
        "Becoming debt-free is one of the most liberating financial goals. "
        "Let's create your payoff strategy."
    ),
    IntentCategory.EDUCATION: (
        "Education is an investment in yourself. Let's calculate the true cost and ROI."
    ),
    IntentCategory.INVESTMENT: (
        "Growing your wealth through investing is smart. "
        "Let's see how compound growth works in your favor."
    ),
    IntentCategory.EMERGENCY_FUND: (
        "A solid emergency fund is your financial safety net. "
        "Let's figure out the right amount for your situation."
    ),
    IntentCategory.GENERAL_FINANCIAL: (
        "Let's take a look at your overall financial picture and identify opportunities."
    ),
}


def classify(query: Any) -> ParsedIntent:
    """Classify a free-text query into a guided planning intent."""
    text = validate_query(query)
    category = match_category(text)
    confidence = KEYWORD_CONFIDENCE if category else BASE_CONFIDENCE
    category = category or IntentCategory.GENERAL_FINANCIAL

    extracted = extract_values(text)
    if extracted.as_prefill():
        confidence = min(confidence + EXTRACTION_BOOST, MAX_CONFIDENCE)

    flow = get_flow_for_intent(category)
    return ParsedIntent(
        category=category,
        confidence=confidence,
        extracted_values=extracted,
        context=describe_context(text),
        suggested_flow=tuple(step.calculator_id for step in flow.steps),
        intro_message=intro_message(category, extracted),
    )


__all__ = [
    "IntentClassificationError",
    "IntentQueryError",
    "KEYWORD_TABLE",
    "classify",
    "describe_context",
    "extract_values",
    "intro_message",
    "match_category",
    "validate_query",
]
