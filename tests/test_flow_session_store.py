try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from datetime import datetime, timedelta, timezone

from finflow.schemas import FlowPhase
from finflow.services import FlowSessionStore, classify


def test_session_round_trip(tmp_path):
    store = FlowSessionStore(db_path=str(tmp_path / "nested" / "sessions.db"))
    session = store.create()
    intent = classify("I want to retire by 50, I'm 30 now")

    sequence = session.begin_query("I want to retire by 50, I'm 30 now")
    session.begin_intake(intent, {"currentAge": 30, "targetAge": 50})
    session.record_answer("currentSavings", 120000)
    session.complete_intake()
    session.record_result("fire-number", {"fireNumber": 1250000, "leanFireNumber": 875000})
    store.save(session)

    loaded = store.get(session.session_id)

    assert loaded is not None
    assert loaded.query_sequence == sequence == 1
    assert loaded.phase is FlowPhase.CALCULATORS
    assert loaded.intent == intent
    assert loaded.intake_values == {"currentAge": 30, "targetAge": 50, "currentSavings": 120000}
    assert list(loaded.step_results["fire-number"]) == ["fireNumber", "leanFireNumber"]
    assert loaded.updated_at == session.updated_at


def test_expired_sessions_are_pruned(tmp_path):
    store = FlowSessionStore(db_path=str(tmp_path / "sessions.db"), ttl_seconds=3600)
    session = store.create()
    session.updated_at = datetime.now(timezone.utc) - timedelta(hours=2)
    store.save(session)

    assert store.get(session.session_id) is None


def test_delete_session(tmp_path):
    store = FlowSessionStore(db_path=str(tmp_path / "sessions.db"))
    session = store.create()

    store.delete(session.session_id)

    assert store.get(session.session_id) is None
