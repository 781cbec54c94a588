"""Public schema exports."""

from .calculator import (
    CalculatorDetail,
    CalculatorSummary,
    ComputeRequest,
    ComputeResponse,
    InputFieldSchema,
)
from .flow import (
    FlowPhase,
    FlowSessionView,
    FlowStep,
    IntakeAnswerRequest,
    IntakeAnswerResponse,
    IntakeAnswerView,
    IntakeQuestionView,
    IntakeView,
    IntentFlow,
    StartFlowRequest,
    StepRequest,
    StepResponse,
    StepView,
    SummaryEntry,
)
from .intent import (
    ExtractedValues,
    IntentCategory,
    IntentContext,
    ParseIntentRequest,
    ParsedIntent,
)

__all__ = [
    "CalculatorDetail",
    "CalculatorSummary",
    "ComputeRequest",
    "ComputeResponse",
    "ExtractedValues",
    "FlowPhase",
    "FlowSessionView",
    "FlowStep",
    "InputFieldSchema",
    "IntakeAnswerRequest",
    "IntakeAnswerResponse",
    "IntakeAnswerView",
    "IntakeQuestionView",
    "IntakeView",
    "IntentCategory",
    "IntentContext",
    "IntentFlow",
    "ParseIntentRequest",
    "ParsedIntent",
    "StartFlowRequest",
    "StepRequest",
    "StepResponse",
    "StepView",
    "SummaryEntry",
]
