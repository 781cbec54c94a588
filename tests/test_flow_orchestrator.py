try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import asyncio

import pytest

from finflow.clients import LocalIntentClient
from finflow.schemas import ExtractedValues, FlowPhase, IntentCategory, ParsedIntent
from finflow.services import (
    FlowOrchestrator,
    FlowPhaseError,
    FlowSessionNotFoundError,
    FlowSessionStore,
    IntakeAnswerError,
    IntentClassificationError,
    IntentQueryError,
    StepNavigationError,
    classify,
)
from finflow.services.flow_orchestrator import NOT_AVAILABLE_MESSAGE

RETIREMENT_QUERY = "I want to retire by 50, I'm 30 now"


class GatedIntentClient:
    """Classifies locally, holding back queries whose gate is not yet open."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}

    async def parse(self, query: str) -> ParsedIntent:
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        return classify(query)


class FailingIntentClient:
    async def parse(self, query: str) -> ParsedIntent:
        raise IntentClassificationError("Failed to parse intent")


class FixedIntentClient:
    def __init__(self, intent: ParsedIntent) -> None:
        self.intent = intent

    async def parse(self, query: str) -> ParsedIntent:
        return self.intent


@pytest.fixture()
def store(tmp_path):
    return FlowSessionStore(db_path=str(tmp_path / "sessions.db"), ttl_seconds=60)


@pytest.fixture()
def orchestrator(store):
    return FlowOrchestrator(store, LocalIntentClient())


@pytest.mark.asyncio
async def test_start_enters_intake_with_pending_questions(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)

    assert session.phase is FlowPhase.INTAKE
    assert session.intent.category is IntentCategory.RETIREMENT
    assert [q.key for q in orchestrator.intake_questions(session)] == [
        "currentSavings",
        "monthlySavings",
        "annualExpenses",
    ]
    assert session.intake_values == {
        "currentAge": 30,
        "targetAge": 50,
        "currentSavings": 50000,
        "monthlySavings": 1500,
        "annualExpenses": 50000,
    }


@pytest.mark.asyncio
async def test_start_rejects_blank_query(orchestrator):
    with pytest.raises(IntentQueryError):
        await orchestrator.start("   ")


@pytest.mark.asyncio
async def test_answers_advance_intake_into_calculators(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)

    session, answer = orchestrator.answer(session.session_id, 150000, key="currentSavings")
    assert answer.formatted_value == "$150K"
    assert answer.response == "Solid foundation"
    assert session.intake_index == 1

    with pytest.raises(IntakeAnswerError):
        orchestrator.answer(session.session_id, 500, key="annualExpenses")
    with pytest.raises(IntakeAnswerError):
        orchestrator.answer(session.session_id, 20000)

    orchestrator.answer(session.session_id, 2000)
    session, _ = orchestrator.answer(session.session_id, 60000)

    assert session.phase is FlowPhase.CALCULATORS
    assert session.intake_values["currentSavings"] == 150000
    assert session.step_results["fire-number"]["fireNumber"] == pytest.approx(1500000)


@pytest.mark.asyncio
async def test_skip_intake_keeps_defaults_and_computes_first_step(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)

    session = orchestrator.skip_intake(session.session_id)

    assert session.phase is FlowPhase.CALCULATORS
    assert session.current_step_index == 0
    assert session.step_results["fire-number"]["fireNumber"] == pytest.approx(1250000)
    assert session.step_results["fire-number"]["targetRetirementAge"] == 50

    with pytest.raises(FlowPhaseError):
        orchestrator.skip_intake(session.session_id)


@pytest.mark.asyncio
async def test_fully_extracted_query_skips_intake(store):
    intent = ParsedIntent(
        category=IntentCategory.EMERGENCY_FUND,
        confidence=0.9,
        extracted_values=ExtractedValues(
            current_age=35, current_savings=20000, annual_expenses=48000
        ),
        intro_message="Let's build your safety net.",
    )
    orchestrator = FlowOrchestrator(store, FixedIntentClient(intent))

    session = await orchestrator.start("emergency fund please")

    assert session.phase is FlowPhase.CALCULATORS
    results = session.step_results["emergency-fund"]
    assert results["monthlyExpenses"] == pytest.approx(4000)
    assert results["currentSavings"] == 20000


@pytest.mark.asyncio
async def test_later_steps_prefill_from_earlier_results(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)

    session, computation = orchestrator.goto_step(session.session_id, 1)

    assert computation.step.calculator_id == "coast-fire"
    assert computation.prefill["fireNumber"] == session.step_results["fire-number"]["fireNumber"]
    assert computation.prefill["currentAge"] == 30
    assert computation.outcome.inputs["fireNumber"] == pytest.approx(1250000)
    assert computation.outcome.inputs["targetRetirementAge"] == 50


@pytest.mark.asyncio
async def test_earlier_results_take_precedence_over_intake_values(orchestrator, store):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)
    session.step_results["fire-number"]["currentAge"] = 41
    store.save(session)

    session, computation = orchestrator.goto_step(session.session_id, 1)

    assert session.intake_values["currentAge"] == 30
    assert computation.prefill["currentAge"] == 41
    assert computation.outcome.inputs["currentAge"] == 41


@pytest.mark.asyncio
async def test_later_results_overwrite_earlier_ones_in_flow_order(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)
    session.step_results["fire-number"]["currentAge"] = 41
    session.step_results["coast-fire"] = {"currentAge": 44}
    flow = orchestrator.flow_for(session)

    prefill = orchestrator.build_prefill(session, flow, 2)

    assert prefill["currentAge"] == 44
    assert prefill["fireNumber"] == session.step_results["fire-number"]["fireNumber"]


@pytest.mark.asyncio
async def test_overrides_apply_to_current_step_only(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)

    session, computation = orchestrator.goto_step(
        session.session_id, 0, {"annualExpenses": 80000}
    )

    assert computation.outcome.inputs["annualExpenses"] == 80000
    assert session.step_results["fire-number"]["fireNumber"] == pytest.approx(2000000)

    session, computation = orchestrator.goto_step(session.session_id, 0)
    assert computation.outcome.inputs["annualExpenses"] == 50000


@pytest.mark.asyncio
async def test_locked_and_missing_steps_are_rejected(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)

    with pytest.raises(StepNavigationError):
        orchestrator.goto_step(session.session_id, 2)
    with pytest.raises(StepNavigationError):
        orchestrator.goto_step(session.session_id, 3)
    with pytest.raises(StepNavigationError):
        orchestrator.goto_step(session.session_id, -1)


@pytest.mark.asyncio
async def test_unsupported_step_does_not_block_flow_and_summary(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)
    orchestrator.next_step(session.session_id)

    session, computation = orchestrator.next_step(session.session_id)

    assert computation.step.calculator_id == "fire-date"
    assert computation.available is False
    assert "fire-date" not in session.step_results
    view = orchestrator.step_view(computation, total=3)
    assert view.message == NOT_AVAILABLE_MESSAGE
    assert view.result is None

    described = orchestrator.describe(session)
    assert [entry.calculator_id for entry in described.summary] == ["fire-number", "coast-fire"]
    assert all(len(entry.values) == 2 for entry in described.summary)
    assert list(described.summary[0].values) == ["fireNumber", "leanFireNumber"]

    full = orchestrator.summary(session)
    assert len(full[0].values) > 2


@pytest.mark.asyncio
async def test_navigation_is_bounded(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)

    session, _ = orchestrator.previous_step(session.session_id)
    assert session.current_step_index == 0

    for _ in range(5):
        session, _ = orchestrator.next_step(session.session_id)
    assert session.current_step_index == 2
    assert session.furthest_step_index == 2


@pytest.mark.asyncio
async def test_stale_classification_is_discarded(store):
    client = GatedIntentClient()
    orchestrator = FlowOrchestrator(store, client)
    session = store.create()
    slow_query = "I want to buy a house"
    gate = asyncio.Event()
    client.gates[slow_query] = gate

    first = asyncio.create_task(orchestrator.submit_query(session.session_id, slow_query))
    await asyncio.sleep(0)
    latest = await orchestrator.submit_query(session.session_id, "I have credit card debt")
    gate.set()
    stale = await first

    assert latest.intent.category is IntentCategory.DEBT_FREEDOM
    assert stale.intent.category is IntentCategory.DEBT_FREEDOM
    stored = orchestrator.get(session.session_id)
    assert stored.query == "I have credit card debt"
    assert stored.query_sequence == 2
    assert stored.intent.category is IntentCategory.DEBT_FREEDOM


@pytest.mark.asyncio
async def test_classification_failure_is_recorded_on_session(store):
    orchestrator = FlowOrchestrator(store, FailingIntentClient())

    session = await orchestrator.start(RETIREMENT_QUERY)

    assert session.error == "Failed to parse intent"
    assert session.phase is FlowPhase.LOADING
    assert session.intent is None
    view = orchestrator.describe(session)
    assert view.flow is None
    assert view.error == "Failed to parse intent"


@pytest.mark.asyncio
async def test_new_query_resets_progress(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)
    session = orchestrator.skip_intake(session.session_id)

    session = await orchestrator.submit_query(session.session_id, "I have credit card debt")

    assert session.phase is FlowPhase.INTAKE
    assert session.step_results == {}
    assert session.current_step_index == 0


@pytest.mark.asyncio
async def test_reset_removes_session(orchestrator):
    session = await orchestrator.start(RETIREMENT_QUERY)

    orchestrator.reset(session.session_id)

    with pytest.raises(FlowSessionNotFoundError):
        orchestrator.get(session.session_id)
    with pytest.raises(FlowSessionNotFoundError):
        orchestrator.reset(session.session_id)
