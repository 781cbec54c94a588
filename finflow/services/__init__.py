"""Service layer exports."""

from .flow_orchestrator import (
    FlowOrchestrator,
    FlowPhaseError,
    FlowSessionNotFoundError,
    StepComputation,
    StepNavigationError,
)
from .flow_registry import INTENT_FLOWS, get_flow_for_intent
from .flow_sessions import FlowSession, FlowSessionStore
from .intake import IntakeAnswerError, IntakeQuestion, questions_for
from .intent_classifier import IntentClassificationError, IntentQueryError, classify

__all__ = [
    "FlowOrchestrator",
    "FlowPhaseError",
    "FlowSession",
    "FlowSessionNotFoundError",
    "FlowSessionStore",
    "INTENT_FLOWS",
    "IntakeAnswerError",
    "IntakeQuestion",
    "IntentClassificationError",
    "IntentQueryError",
    "StepComputation",
    "StepNavigationError",
    "classify",
    "get_flow_for_intent",
    "questions_for",
]
