"""
FastAPI routes for the calculator suite and guided flows.
"""

from __future__ import annotations

import dataclasses
import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query

from finflow.calculators import (
    CALCULATOR_CATALOG,
    CalculatorInputError,
    compute,
    get_catalog_entry,
    get_definition,
    resolve_kind,
)
from finflow.dependencies import get_app_settings, get_flow_orchestrator
from finflow.schemas import (
    CalculatorDetail,
    CalculatorSummary,
    ComputeRequest,
    ComputeResponse,
    FlowSessionView,
    InputFieldSchema,
    IntakeAnswerRequest,
    IntakeAnswerResponse,
    IntentCategory,
    IntentFlow,
    ParseIntentRequest,
    ParsedIntent,
    StartFlowRequest,
    StepRequest,
    StepResponse,
    SummaryEntry,
)
from finflow.services import (
    INTENT_FLOWS,
    FlowPhaseError,
    FlowSessionNotFoundError,
    IntakeAnswerError,
    IntentQueryError,
    StepNavigationError,
    classify,
    get_flow_for_intent,
)
from finflow.services.flow_orchestrator import NOT_AVAILABLE_MESSAGE

router = APIRouter()
logger = logging.getLogger(__name__)


_FLOW_ERRORS = (
    FlowSessionNotFoundError,
    FlowPhaseError,
    StepNavigationError,
    IntakeAnswerError,
    CalculatorInputError,
    IntentQueryError,
)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: Annotated[Any, Depends(get_app_settings)]) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.post(
    "/intent/parse",
    response_model=ParsedIntent,
    response_model_exclude_none=True,
)
async def parse_intent(payload: ParseIntentRequest) -> ParsedIntent:
    """Classify a free-text query into a guided planning intent."""
    try:
        return classify(payload.query)
    except IntentQueryError as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Intent parsing failed")
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail="Failed to parse intent",
        ) from exc


@router.get("/calculators", response_model=list[CalculatorSummary])
async def list_calculators() -> list[CalculatorSummary]:
    """List known calculators and whether each can be computed."""
    return [
        CalculatorSummary(
            slug=entry.slug,
            name=entry.name,
            short_name=entry.short_name,
            description=entry.description,
            category=entry.category,
            available=resolve_kind(entry.slug) is not None,
        )
        for entry in CALCULATOR_CATALOG
    ]


@router.get("/calculators/{calculator_id}", response_model=CalculatorDetail)
async def describe_calculator(calculator_id: str) -> CalculatorDetail:
    """Return the input metadata of an implemented calculator."""
    kind = _require_calculator(calculator_id)
    entry = get_catalog_entry(kind.value)
    return CalculatorDetail(
        slug=kind.value,
        name=entry.name if entry else kind.value,
        short_name=entry.short_name if entry else kind.value,
        description=entry.description if entry else "",
        category=entry.category if entry else "",
        available=True,
        fields=[
            InputFieldSchema(
                key=field.key,
                label=field.label,
                default=field.default,
                min=field.min,
                max=field.max,
                step=field.step,
                prefill_sources=[item.key for item in field.lookup_order()],
            )
            for field in get_definition(kind).fields
        ],
    )


@router.post("/calculators/{calculator_id}/compute", response_model=ComputeResponse)
async def compute_calculator(calculator_id: str, payload: ComputeRequest) -> ComputeResponse:
    """Compute a calculator from the supplied inputs, defaulting the rest."""
    kind = _require_calculator(calculator_id)
    try:
        outcome = compute(kind, prefill=payload.inputs)
    except CalculatorInputError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    entry = get_catalog_entry(kind.value)
    return ComputeResponse(
        calculator_id=kind.value,
        name=entry.name if entry else None,
        inputs=outcome.inputs,
        reported=outcome.reported,
        result=dataclasses.asdict(outcome.result),
    )


@router.get("/flows", response_model=list[IntentFlow])
async def list_flows() -> list[IntentFlow]:
    """List the guided flow for every intent category."""
    return list(INTENT_FLOWS.values())


@router.get("/flows/{category}", response_model=IntentFlow)
async def get_flow(category: str) -> IntentFlow:
    try:
        return get_flow_for_intent(IntentCategory(category))
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND, detail=f"Unknown intent category '{category}'."
        ) from exc


@router.post(
    "/sessions", response_model=FlowSessionView, status_code=HTTPStatus.CREATED
)
async def start_session(
    payload: StartFlowRequest,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> FlowSessionView:
    """Create a flow session from a query and classify it."""
    try:
        session = await orchestrator.start(payload.query)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return orchestrator.describe(session)


@router.get("/sessions/{session_id}", response_model=FlowSessionView)
async def get_session(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> FlowSessionView:
    try:
        session = orchestrator.get(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return orchestrator.describe(session)


@router.post("/sessions/{session_id}/query", response_model=FlowSessionView)
async def submit_query(
    session_id: str,
    payload: StartFlowRequest,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> FlowSessionView:
    """Restart an existing session with a new query."""
    try:
        session = await orchestrator.submit_query(session_id, payload.query)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return orchestrator.describe(session)


@router.post(
    "/sessions/{session_id}/intake/answer", response_model=IntakeAnswerResponse
)
async def answer_intake_question(
    session_id: str,
    payload: IntakeAnswerRequest,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> IntakeAnswerResponse:
    try:
        session, answer = orchestrator.answer(session_id, payload.value, key=payload.key)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return IntakeAnswerResponse(answer=answer, session=orchestrator.describe(session))


@router.post("/sessions/{session_id}/intake/skip", response_model=FlowSessionView)
async def skip_intake(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> FlowSessionView:
    """Accept defaults for all remaining intake questions."""
    try:
        session = orchestrator.skip_intake(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return orchestrator.describe(session)


@router.post("/sessions/{session_id}/steps/{index}", response_model=StepResponse)
async def visit_step(
    session_id: str,
    index: int,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
    payload: StepRequest | None = None,
) -> StepResponse:
    """Navigate to a step and compute it, applying any input overrides."""
    overrides = payload.overrides if payload else None
    try:
        session, computation = orchestrator.goto_step(session_id, index, overrides)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return _step_response(orchestrator, session, computation)


@router.post("/sessions/{session_id}/next", response_model=StepResponse)
async def next_step(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> StepResponse:
    try:
        session, computation = orchestrator.next_step(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return _step_response(orchestrator, session, computation)


@router.post("/sessions/{session_id}/previous", response_model=StepResponse)
async def previous_step(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> StepResponse:
    try:
        session, computation = orchestrator.previous_step(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return _step_response(orchestrator, session, computation)


@router.get("/sessions/{session_id}/summary", response_model=list[SummaryEntry])
async def get_summary(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
    limit: int | None = Query(
        default=None,
        ge=1,
        description="Reported fields to include per step; all when omitted.",
    ),
) -> list[SummaryEntry]:
    """Summarise the recorded results of every visited step."""
    try:
        session = orchestrator.get(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc
    return orchestrator.summary(session, limit)


@router.delete("/sessions/{session_id}", status_code=HTTPStatus.NO_CONTENT)
async def reset_session(
    session_id: str,
    orchestrator: Annotated[Any, Depends(get_flow_orchestrator)],
) -> None:
    try:
        orchestrator.reset(session_id)
    except _FLOW_ERRORS as exc:
        raise _flow_http_error(exc) from exc


def _require_calculator(calculator_id: str):
    kind = resolve_kind(calculator_id)
    if kind is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=NOT_AVAILABLE_MESSAGE)
    return kind


def _step_response(orchestrator: Any, session: Any, computation: Any) -> StepResponse:
    total = len(orchestrator.flow_for(session).steps)
    return StepResponse(
        step=orchestrator.step_view(computation, total=total),
        session=orchestrator.describe(session),
    )


def _flow_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, FlowSessionNotFoundError):
        return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    if isinstance(exc, IntentQueryError):
        return HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    if isinstance(exc, (IntakeAnswerError, CalculatorInputError)):
        return HTTPException(status_code=HTTPStatus.UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))


__all__ = ["router"]
