try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from finflow.clients import LocalIntentClient
from finflow.main import app
from finflow.services import FlowOrchestrator, FlowSessionStore

pytestmark = pytest.mark.anyio("asyncio")

RETIREMENT_QUERY = "I want to retire by 50, I'm 30 now"


@pytest.fixture()
def orchestrator(tmp_path):
    from finflow import dependencies

    store = FlowSessionStore(db_path=str(tmp_path / "sessions.db"), ttl_seconds=60)
    orchestrator = FlowOrchestrator(store, LocalIntentClient())

    app.dependency_overrides.clear()
    app.dependency_overrides[dependencies.get_flow_orchestrator] = lambda: orchestrator

    yield orchestrator

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(orchestrator):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_parse_intent(client):
    response = await client.post("/api/intent/parse", json={"query": RETIREMENT_QUERY})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "retirement"
    assert body["extractedValues"] == {"currentAge": 30, "targetAge": 50}
    assert body["suggestedFlow"] == ["fire-number", "coast-fire", "fire-date"]
    assert body["context"]["urgency"] == "exploring"


@pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": "   "}])
async def test_parse_intent_requires_query(client, payload):
    response = await client.post("/api/intent/parse", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Query is required"


@pytest.mark.parametrize("query", [42, ["retire"], {"text": "retire"}, True])
async def test_parse_intent_rejects_non_string_query(client, query):
    response = await client.post("/api/intent/parse", json={"query": query})

    assert response.status_code == 400
    assert response.json()["detail"] == "Query is required"


async def test_parse_intent_internal_failure(client, monkeypatch):
    def broken(query):
        raise RuntimeError("boom")

    monkeypatch.setattr("finflow.api.routes.classify", broken)

    response = await client.post("/api/intent/parse", json={"query": RETIREMENT_QUERY})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to parse intent"


async def test_list_calculators_flags_availability(client):
    response = await client.get("/api/calculators")

    assert response.status_code == 200
    available = {item["slug"]: item["available"] for item in response.json()}
    assert available["fire-number"] is True
    assert available["student-loan"] is False


async def test_describe_calculator(client):
    response = await client.get("/api/calculators/emergency-fund")

    assert response.status_code == 200
    fields = {field["key"]: field for field in response.json()["fields"]}
    assert fields["monthlyExpenses"]["prefillSources"] == ["annualExpenses", "monthlyExpenses"]
    assert fields["targetMonths"]["min"] == 3


async def test_unknown_calculator_is_not_available(client):
    response = await client.get("/api/calculators/fire-date")

    assert response.status_code == 404
    assert response.json()["detail"] == "This calculator is not yet available."


async def test_compute_calculator(client):
    response = await client.post(
        "/api/calculators/fire-number/compute",
        json={"inputs": {"annualExpenses": 40000, "withdrawalRate": 9}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["calculatorId"] == "fire-number"
    assert body["inputs"]["withdrawalRate"] == 5
    assert body["reported"]["fireNumber"] == pytest.approx(800000)
    assert len(body["result"]["projection"]) > 0


async def test_compute_rejects_non_numeric_input(client):
    response = await client.post(
        "/api/calculators/fire-number/compute",
        json={"inputs": {"annualExpenses": "plenty"}},
    )

    assert response.status_code == 422


async def test_flow_templates(client):
    listing = await client.get("/api/flows")
    single = await client.get("/api/flows/home_buying")
    missing = await client.get("/api/flows/lottery")

    assert listing.status_code == 200
    assert len(listing.json()) == 9
    assert [step["calculatorId"] for step in single.json()["steps"]] == [
        "home-affordability",
        "down-payment",
        "mortgage-payment",
    ]
    assert missing.status_code == 404


async def test_session_walkthrough(client):
    created = await client.post("/api/sessions", json={"query": RETIREMENT_QUERY})
    assert created.status_code == 201
    session = created.json()
    session_id = session["sessionId"]
    assert session["phase"] == "intake"
    assert session["intake"]["question"]["key"] == "currentSavings"

    answered = await client.post(
        f"/api/sessions/{session_id}/intake/answer",
        json={"value": 150000, "key": "currentSavings"},
    )
    assert answered.status_code == 200
    assert answered.json()["answer"]["response"] == "Solid foundation"

    out_of_range = await client.post(
        f"/api/sessions/{session_id}/intake/answer", json={"value": 999999}
    )
    assert out_of_range.status_code == 422

    locked = await client.post(f"/api/sessions/{session_id}/steps/1", json={})
    assert locked.status_code == 409

    skipped = await client.post(f"/api/sessions/{session_id}/intake/skip")
    assert skipped.status_code == 200
    assert skipped.json()["phase"] == "calculators"
    assert skipped.json()["currentStep"]["calculatorId"] == "fire-number"

    step = await client.post(
        f"/api/sessions/{session_id}/steps/1",
        json={"overrides": {"expectedReturn": 8}},
    )
    assert step.status_code == 200
    assert step.json()["step"]["inputs"]["expectedReturn"] == 8

    last = await client.post(f"/api/sessions/{session_id}/next")
    assert last.status_code == 200
    body = last.json()
    assert body["step"]["available"] is False
    assert body["step"]["message"] == "This calculator is not yet available."
    assert [entry["calculatorId"] for entry in body["session"]["summary"]] == [
        "fire-number",
        "coast-fire",
    ]

    summary = await client.get(f"/api/sessions/{session_id}/summary", params={"limit": 1})
    assert summary.status_code == 200
    assert all(len(entry["values"]) == 1 for entry in summary.json())

    previous = await client.post(f"/api/sessions/{session_id}/previous")
    assert previous.json()["step"]["index"] == 1

    deleted = await client.delete(f"/api/sessions/{session_id}")
    assert deleted.status_code == 204
    gone = await client.get(f"/api/sessions/{session_id}")
    assert gone.status_code == 404


async def test_submit_new_query_resets_session(client):
    created = await client.post("/api/sessions", json={"query": RETIREMENT_QUERY})
    session_id = created.json()["sessionId"]

    response = await client.post(
        f"/api/sessions/{session_id}/query", json={"query": "I have credit card debt"}
    )

    assert response.status_code == 200
    assert response.json()["intent"]["category"] == "debt_freedom"
    assert response.json()["stepResults"] == {}


@pytest.mark.parametrize("payload", [{"query": " "}, {"query": 7}, {}])
async def test_start_session_requires_query(client, payload):
    response = await client.post("/api/sessions", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Query is required"


async def test_submit_query_rejects_non_string_query(client):
    created = await client.post("/api/sessions", json={"query": RETIREMENT_QUERY})
    session_id = created.json()["sessionId"]

    response = await client.post(f"/api/sessions/{session_id}/query", json={"query": 3.5})

    assert response.status_code == 400
    assert response.json()["detail"] == "Query is required"


async def test_unknown_session(client):
    response = await client.post("/api/sessions/missing/intake/skip")

    assert response.status_code == 404
