"""
Guided flow orchestration.

A session moves through three phases: ``loading`` while the query is being
classified, ``intake`` while missing numbers are collected, and
``calculators`` while the user steps through the flow. Each calculator step
is prefilled from the intake values and from the results of earlier steps.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from finflow.calculators import CalculatorKind, CalculatorOutcome, compute, resolve_kind
from finflow.schemas import (
    FlowPhase,
    FlowSessionView,
    FlowStep,
    IntakeAnswerView,
    IntakeQuestionView,
    IntakeView,
    IntentFlow,
    ParsedIntent,
    StepView,
    SummaryEntry,
)
from finflow.services.flow_registry import get_flow_for_intent
from finflow.services.flow_sessions import FlowSession, FlowSessionStore
from finflow.services.intake import (
    IntakeAnswerError,
    IntakeQuestion,
    initial_values,
    pending_questions,
)
from finflow.services.intent_classifier import IntentClassificationError, validate_query

logger = logging.getLogger(__name__)

NOT_AVAILABLE_MESSAGE = "This calculator is not yet available."


class FlowSessionNotFoundError(LookupError):
    """Raised when a session does not exist or has expired."""


class FlowPhaseError(RuntimeError):
    """Raised when an operation does not apply to the session's phase."""


class StepNavigationError(RuntimeError):
    """Raised when navigating to a step that does not exist or is locked."""


@dataclass(slots=True)
class StepComputation:
    """The outcome of visiting a flow step."""

    index: int
    step: FlowStep
    kind: Optional[CalculatorKind]
    prefill: dict[str, float]
    outcome: Optional[CalculatorOutcome] = None

    @property
    def available(self) -> bool:
        return self.kind is not None


class FlowOrchestrator:
    """Drive flow sessions from a query to a cross-step summary."""

    def __init__(
        self,
        store: FlowSessionStore,
        intent_client: Any,
        *,
        summary_field_limit: Optional[int] = 2,
    ) -> None:
        self._store = store
        self._intent_client = intent_client
        self._summary_field_limit = summary_field_limit

    @property
    def summary_field_limit(self) -> Optional[int]:
        return self._summary_field_limit

    # Loading

    async def start(self, query: Any) -> FlowSession:
        """Create a session and classify its first query."""
        validate_query(query)
        session = self._store.create()
        return await self.submit_query(session.session_id, query)

    async def submit_query(self, session_id: str, query: Any) -> FlowSession:
        """
        Reset the session for ``query`` and classify it.

        Each submission takes a new sequence number. A classification that
        returns after a newer query was submitted is discarded.
        """
        text = validate_query(query)
        session = self.get(session_id)
        sequence = session.begin_query(text)
        self._store.save(session)

        try:
            intent = await self._intent_client.parse(text)
        except IntentClassificationError as exc:
            latest = self.get(session_id)
            if latest.query_sequence != sequence:
                logger.info(
                    "Ignoring classification failure for superseded query %s of session %s",
                    sequence,
                    session_id,
                )
                return latest
            logger.warning("Classification failed for session %s: %s", session_id, exc)
            latest.fail(str(exc))
            self._store.save(latest)
            return latest

        latest = self.get(session_id)
        if latest.query_sequence != sequence:
            logger.info(
                "Discarding stale classification %s for session %s (latest %s)",
                sequence,
                session_id,
                latest.query_sequence,
            )
            return latest

        self._apply_intent(latest, intent)
        self._store.save(latest)
        return latest

    def _apply_intent(self, session: FlowSession, intent: ParsedIntent) -> None:
        extracted = intent.extracted_values.as_prefill()
        session.begin_intake(intent, initial_values(intent.category, extracted))
        if not pending_questions(intent.category, extracted):
            self._enter_calculators(session)

    # Intake

    def intake_questions(self, session: FlowSession) -> tuple[IntakeQuestion, ...]:
        if session.intent is None:
            return ()
        return pending_questions(
            session.intent.category, session.intent.extracted_values.as_prefill()
        )

    def current_question(self, session: FlowSession) -> Optional[IntakeQuestion]:
        questions = self.intake_questions(session)
        if session.phase is not FlowPhase.INTAKE or session.intake_index >= len(questions):
            return None
        return questions[session.intake_index]

    def answer(
        self, session_id: str, value: float, key: Optional[str] = None
    ) -> tuple[FlowSession, IntakeAnswerView]:
        """Record an answer to the current intake question."""
        session = self._require_phase(session_id, FlowPhase.INTAKE)
        question = self.current_question(session)
        if question is None:
            raise FlowPhaseError("There is no intake question awaiting an answer.")
        if key is not None and key != question.key:
            raise IntakeAnswerError(
                f"Expected an answer for '{question.key}', got '{key}'."
            )
        question.validate(value)

        session.record_answer(question.key, value)
        answer = IntakeAnswerView(
            key=question.key,
            value=value,
            formatted_value=question.format(value),
            response=question.respond(value, session.intake_values),
        )
        if session.intake_index >= len(self.intake_questions(session)):
            self._enter_calculators(session)
        self._store.save(session)
        return session, answer

    def skip_intake(self, session_id: str) -> FlowSession:
        """Keep default values for every unanswered question."""
        session = self._require_phase(session_id, FlowPhase.INTAKE)
        self._enter_calculators(session)
        self._store.save(session)
        return session

    def _enter_calculators(self, session: FlowSession) -> None:
        session.complete_intake()
        self._compute_step(session, self.flow_for(session), 0)

    # Calculators

    def flow_for(self, session: FlowSession) -> IntentFlow:
        if session.intent is None:
            raise FlowPhaseError("The session has no classified intent yet.")
        return get_flow_for_intent(session.intent.category)

    def build_prefill(
        self, session: FlowSession, flow: IntentFlow, index: int
    ) -> dict[str, float]:
        """
        Merge the values a step is prefilled with.

        Intake values come first, then the results of earlier steps in flow
        order, each overwriting keys set before it.
        """
        step = flow.steps[index]
        prefill: dict[str, float] = {}
        if "extracted" in step.prefill_from:
            prefill.update(session.intake_values)
        if "previous" in step.prefill_from:
            for earlier in flow.steps[:index]:
                prefill.update(session.step_results.get(earlier.calculator_id, {}))
        return prefill

    def goto_step(
        self,
        session_id: str,
        index: int,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> tuple[FlowSession, StepComputation]:
        """Move to step ``index`` and compute it with optional input overrides."""
        session = self._require_phase(session_id, FlowPhase.CALCULATORS)
        flow = self.flow_for(session)
        if not 0 <= index < len(flow.steps):
            raise StepNavigationError(f"Step {index} does not exist in this flow.")
        if index > session.furthest_step_index + 1:
            raise StepNavigationError(f"Step {index} is not unlocked yet.")

        session.move_to(index)
        computation = self._compute_step(session, flow, index, overrides)
        self._store.save(session)
        return session, computation

    def next_step(self, session_id: str) -> tuple[FlowSession, StepComputation]:
        session = self._require_phase(session_id, FlowPhase.CALCULATORS)
        last = len(self.flow_for(session).steps) - 1
        return self.goto_step(session_id, min(session.current_step_index + 1, last))

    def previous_step(self, session_id: str) -> tuple[FlowSession, StepComputation]:
        session = self._require_phase(session_id, FlowPhase.CALCULATORS)
        return self.goto_step(session_id, max(session.current_step_index - 1, 0))

    def _compute_step(
        self,
        session: FlowSession,
        flow: IntentFlow,
        index: int,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> StepComputation:
        step = flow.steps[index]
        prefill = self.build_prefill(session, flow, index)
        kind = resolve_kind(step.calculator_id)
        computation = StepComputation(index=index, step=step, kind=kind, prefill=prefill)
        if kind is None:
            logger.info("Calculator %s is not yet available", step.calculator_id)
            return computation

        computation.outcome = compute(kind, prefill, overrides)
        session.record_result(step.calculator_id, computation.outcome.reported)
        return computation

    # Summary and lifecycle

    def summary(
        self, session: FlowSession, limit: Optional[int] = None
    ) -> list[SummaryEntry]:
        """Recorded results per step in flow order, ``limit`` fields each."""
        if session.intent is None:
            return []
        entries = []
        for step in self.flow_for(session).steps:
            results = session.step_results.get(step.calculator_id)
            if not results:
                continue
            items = list(results.items())
            if limit is not None:
                items = items[:limit]
            entries.append(
                SummaryEntry(
                    calculator_id=step.calculator_id, title=step.title, values=dict(items)
                )
            )
        return entries

    def summary_ready(self, session: FlowSession) -> bool:
        if session.phase is not FlowPhase.CALCULATORS or not session.step_results:
            return False
        return session.current_step_index == len(self.flow_for(session).steps) - 1

    def get(self, session_id: str) -> FlowSession:
        session = self._store.get(session_id)
        if session is None:
            raise FlowSessionNotFoundError(f"Flow session {session_id} not found.")
        return session

    def reset(self, session_id: str) -> None:
        self.get(session_id)
        self._store.delete(session_id)

    def _require_phase(self, session_id: str, phase: FlowPhase) -> FlowSession:
        session = self.get(session_id)
        if session.phase is not phase:
            raise FlowPhaseError(
                f"Session is in the {session.phase.value} phase, not {phase.value}."
            )
        return session

    # Views

    def describe(self, session: FlowSession) -> FlowSessionView:
        """Client-facing snapshot of a session."""
        flow = self.flow_for(session) if session.intent else None
        view = FlowSessionView(
            session_id=session.session_id,
            phase=session.phase,
            query=session.query,
            error=session.error,
            intent=session.intent,
            flow=flow,
            intake_values=session.intake_values,
            current_step_index=session.current_step_index,
            step_results=session.step_results,
        )
        if session.phase is FlowPhase.INTAKE:
            view.intake = self._intake_view(session)
        if session.phase is FlowPhase.CALCULATORS and flow is not None:
            index = session.current_step_index
            step = flow.steps[index]
            kind = resolve_kind(step.calculator_id)
            view.current_step = self.step_view(
                StepComputation(
                    index=index,
                    step=step,
                    kind=kind,
                    prefill=self.build_prefill(session, flow, index),
                ),
                total=len(flow.steps),
                reported=session.step_results.get(step.calculator_id, {}),
            )
            if self.summary_ready(session):
                view.summary = self.summary(session, self._summary_field_limit)
        return view

    def step_view(
        self,
        computation: StepComputation,
        *,
        total: int,
        reported: Optional[Mapping[str, float]] = None,
    ) -> StepView:
        outcome = computation.outcome
        step = computation.step
        return StepView(
            index=computation.index,
            total=total,
            calculator_id=step.calculator_id,
            title=step.title,
            description=step.description,
            why_this_matters=step.why_this_matters,
            available=computation.available,
            message=None if computation.available else NOT_AVAILABLE_MESSAGE,
            prefill=computation.prefill,
            inputs=outcome.inputs if outcome else {},
            reported=outcome.reported if outcome else dict(reported or {}),
            result=dataclasses.asdict(outcome.result) if outcome else None,
        )

    def _intake_view(self, session: FlowSession) -> IntakeView:
        questions = self.intake_questions(session)
        question = self.current_question(session)
        question_view = None
        if question is not None:
            value = session.intake_values.get(question.key, question.default)
            question_view = IntakeQuestionView(
                key=question.key,
                question=question.question,
                subtext=question.subtext,
                min=question.min,
                max=question.max,
                step=question.step,
                default=question.default,
                value=value,
                formatted_value=question.format(value),
            )
        return IntakeView(
            index=session.intake_index, total=len(questions), question=question_view
        )


__all__ = [
    "FlowOrchestrator",
    "FlowPhaseError",
    "FlowSessionNotFoundError",
    "NOT_AVAILABLE_MESSAGE",
    "StepComputation",
    "StepNavigationError",
]
