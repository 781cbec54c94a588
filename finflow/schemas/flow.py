"""
Pydantic models for guided flows and flow sessions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .intent import CamelModel, IntentCategory, ParsedIntent

PrefillSourceName = Literal["extracted", "previous"]


class FlowPhase(str, Enum):
    LOADING = "loading"
    INTAKE = "intake"
    CALCULATORS = "calculators"


class FlowStep(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    calculator_id: str
    title: str
    description: str
    why_this_matters: str
    prefill_from: tuple[PrefillSourceName, ...] = ("extracted", "previous")


class IntentFlow(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    category: IntentCategory
    name: str
    description: str
    steps: tuple[FlowStep, ...]


class StartFlowRequest(BaseModel):
    query: Any = Field(
        None, description="Free-text description of the user's financial goal."
    )


class IntakeAnswerRequest(BaseModel):
    value: float = Field(..., description="Answer to the current intake question.")
    key: Optional[str] = Field(
        None,
        description="Key of the question being answered; rejected if not current.",
    )


class StepRequest(BaseModel):
    overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Calculator inputs adjusted by the user, keyed by input name.",
    )


class IntakeQuestionView(CamelModel):
    key: str
    question: str
    subtext: Optional[str] = None
    min: float
    max: float
    step: float
    default: float
    value: float
    formatted_value: str


class IntakeView(CamelModel):
    index: int
    total: int
    question: Optional[IntakeQuestionView] = None


class IntakeAnswerView(CamelModel):
    key: str
    value: float
    formatted_value: str
    response: Optional[str] = None


class StepView(CamelModel):
    """A flow step as presented to the client."""

    index: int
    total: int
    calculator_id: str
    title: str
    description: str
    why_this_matters: str
    available: bool
    message: Optional[str] = None
    prefill: dict[str, float] = Field(default_factory=dict)
    inputs: dict[str, float] = Field(default_factory=dict)
    reported: dict[str, float] = Field(default_factory=dict)
    result: Optional[dict[str, Any]] = None


class SummaryEntry(CamelModel):
    calculator_id: str
    title: str
    values: dict[str, float]


class FlowSessionView(CamelModel):
    session_id: str
    phase: FlowPhase
    query: str
    error: Optional[str] = None
    intent: Optional[ParsedIntent] = None
    flow: Optional[IntentFlow] = None
    intake: Optional[IntakeView] = None
    intake_values: dict[str, float] = Field(default_factory=dict)
    current_step_index: int = 0
    current_step: Optional[StepView] = None
    step_results: dict[str, dict[str, float]] = Field(default_factory=dict)
    summary: Optional[list[SummaryEntry]] = None


class IntakeAnswerResponse(CamelModel):
    answer: IntakeAnswerView
    session: FlowSessionView


class StepResponse(CamelModel):
    step: StepView
    session: FlowSessionView


__all__ = [
    "FlowPhase",
    "FlowSessionView",
    "FlowStep",
    "IntakeAnswerRequest",
    "IntakeAnswerResponse",
    "IntakeAnswerView",
    "IntakeQuestionView",
    "IntakeView",
    "IntentFlow",
    "PrefillSourceName",
    "StartFlowRequest",
    "StepRequest",
    "StepResponse",
    "StepView",
    "SummaryEntry",
]
