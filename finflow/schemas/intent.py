"""
Pydantic models describing a classified planning intent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanged with clients using camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IntentCategory(str, Enum):
    RETIREMENT = "retirement"
    FIRE = "fire"
    HOME_BUYING = "home_buying"
    CAREER_CHANGE = "career_change"
    DEBT_FREEDOM = "debt_freedom"
    EDUCATION = "education"
    INVESTMENT = "investment"
    EMERGENCY_FUND = "emergency_fund"
    GENERAL_FINANCIAL = "general_financial"


Urgency = Literal["exploring", "planning", "urgent"]
Sentiment = Literal["anxious", "curious", "optimistic", "neutral"]


class ExtractedValues(CamelModel):
    """Numbers recognised in a free-text query."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_age: Optional[int] = None
    target_age: Optional[int] = None
    current_savings: Optional[float] = None
    monthly_savings: Optional[float] = None
    annual_expenses: Optional[float] = None
    annual_income: Optional[float] = None
    target_amount: Optional[float] = None
    timeline: Optional[int] = Field(None, description="Planning horizon in years.")

    def as_prefill(self) -> dict[str, float]:
        """Extracted values keyed the way calculators read them."""
        return {
            key: float(value)
            for key, value in self.model_dump(by_alias=True, exclude_none=True).items()
        }


class IntentContext(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    urgency: Urgency = "exploring"
    sentiment: Sentiment = "curious"
    specific_goal: Optional[str] = None


class ParsedIntent(CamelModel):
    """Classification of a user's query. Immutable once produced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    category: IntentCategory
    confidence: float = Field(..., ge=0, le=1)
    extracted_values: ExtractedValues = Field(default_factory=ExtractedValues)
    context: IntentContext = Field(default_factory=IntentContext)
    suggested_flow: tuple[str, ...] = Field(
        default_factory=tuple, description="Calculator identifiers in flow order."
    )
    intro_message: str


class ParseIntentRequest(BaseModel):
    """Body accepted by the intent parsing endpoint."""

    query: Any = Field(
        None,
        description="Free-text description of the user's financial goal.",
    )


__all__ = [
    "CamelModel",
    "ExtractedValues",
    "IntentCategory",
    "IntentContext",
    "ParseIntentRequest",
    "ParsedIntent",
    "Sentiment",
    "Urgency",
]
