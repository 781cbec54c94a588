"""SQLite-backed storage for guided flow sessions."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional
from uuid import uuid4

from finflow.schemas import FlowPhase, ParsedIntent


def _ensure_directory(db_path: Path) -> None:
    if db_path.parent and not db_path.parent.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)


@dataclass(slots=True)
class FlowSession:
    """Represents one user's progress through a guided flow."""

    session_id: str
    query: str = ""
    phase: FlowPhase = FlowPhase.LOADING
    query_sequence: int = 0
    error: Optional[str] = None
    intent: Optional[ParsedIntent] = None
    intake_index: int = 0
    intake_values: Dict[str, float] = field(default_factory=dict)
    current_step_index: int = 0
    furthest_step_index: int = 0
    step_results: Dict[str, Dict[str, float]] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def begin_query(self, query: str) -> int:
        """Discard all progress for a new query and return its sequence number."""
        self.query = query
        self.phase = FlowPhase.LOADING
        self.query_sequence += 1
        self.error = None
        self.intent = None
        self.intake_index = 0
        self.intake_values = {}
        self.current_step_index = 0
        self.furthest_step_index = 0
        self.step_results = {}
        self.touch()
        return self.query_sequence

    def fail(self, message: str) -> None:
        self.error = message
        self.touch()

    def begin_intake(self, intent: ParsedIntent, values: Dict[str, float]) -> None:
        self.intent = intent
        self.intake_values = dict(values)
        self.intake_index = 0
        self.phase = FlowPhase.INTAKE
        self.touch()

    def record_answer(self, key: str, value: float) -> None:
        self.intake_values[key] = value
        self.intake_index += 1
        self.touch()

    def complete_intake(self) -> None:
        self.phase = FlowPhase.CALCULATORS
        self.current_step_index = 0
        self.furthest_step_index = 0
        self.touch()

    def move_to(self, index: int) -> None:
        self.current_step_index = index
        self.furthest_step_index = max(self.furthest_step_index, index)
        self.touch()

    def record_result(self, calculator_id: str, values: Dict[str, float]) -> None:
        self.step_results[calculator_id] = dict(values)
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class FlowSessionStore:
    """SQLite-backed flow session store with TTL pruning."""

    def __init__(self, db_path: str, ttl_seconds: int = 3600) -> None:
        self._db_path = Path(db_path)
        self._ttl = ttl_seconds
        _ensure_directory(self._db_path)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self._db_path,
            detect_types=sqlite3.PARSE_DECLTYPES,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS flow_sessions (
                    session_id TEXT PRIMARY KEY,
                    query TEXT NOT NULL,
                    phase TEXT NOT NULL,
                    query_sequence INTEGER NOT NULL,
                    error TEXT,
                    intent TEXT,
                    intake_index INTEGER NOT NULL,
                    intake_values TEXT,
                    current_step_index INTEGER NOT NULL,
                    furthest_step_index INTEGER NOT NULL,
                    step_results TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def _prune(self) -> None:
        threshold = (
            datetime.now(timezone.utc) - timedelta(seconds=self._ttl)
        ).isoformat()
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM flow_sessions WHERE updated_at < ?",
                (threshold,),
            )

    def create(self) -> FlowSession:
        self._prune()
        session = FlowSession(session_id=uuid4().hex)
        self.save(session)
        return session

    def get(self, session_id: str) -> Optional[FlowSession]:
        self._prune()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM flow_sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        if not row:
            return None
        return self._row_to_session(row)

    def delete(self, session_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM flow_sessions WHERE session_id = ?",
                (session_id,),
            )

    def save(self, session: FlowSession) -> None:
        intent_json = (
            json.dumps(session.intent.model_dump(mode="json"))
            if session.intent
            else None
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO flow_sessions (
                    session_id,
                    query,
                    phase,
                    query_sequence,
                    error,
                    intent,
                    intake_index,
                    intake_values,
                    current_step_index,
                    furthest_step_index,
                    step_results,
                    created_at,
                    updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                    query = excluded.query,
                    phase = excluded.phase,
                    query_sequence = excluded.query_sequence,
                    error = excluded.error,
                    intent = excluded.intent,
                    intake_index = excluded.intake_index,
                    intake_values = excluded.intake_values,
                    current_step_index = excluded.current_step_index,
                    furthest_step_index = excluded.furthest_step_index,
                    step_results = excluded.step_results,
                    updated_at = excluded.updated_at
                """,
                (
                    session.session_id,
                    session.query,
                    session.phase.value,
                    session.query_sequence,
                    session.error,
                    intent_json,
                    session.intake_index,
                    json.dumps(session.intake_values),
                    session.current_step_index,
                    session.furthest_step_index,
                    json.dumps(session.step_results),
                    session.created_at.isoformat(),
                    session.updated_at.isoformat(),
                ),
            )

    def _row_to_session(self, row: sqlite3.Row) -> FlowSession:
        intent = None
        if row["intent"]:
            intent = ParsedIntent.model_validate(json.loads(row["intent"]))
        return FlowSession(
            session_id=row["session_id"],
            query=row["query"],
            phase=FlowPhase(row["phase"]),
            query_sequence=row["query_sequence"],
            error=row["error"],
            intent=intent,
            intake_index=row["intake_index"],
            intake_values=json.loads(row["intake_values"]) if row["intake_values"] else {},
            current_step_index=row["current_step_index"],
            furthest_step_index=row["furthest_step_index"],
            step_results=json.loads(row["step_results"]) if row["step_results"] else {},
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


__all__ = ["FlowSession", "FlowSessionStore"]
