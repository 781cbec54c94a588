#!/usr/bin/env python
"""Run a guided planning flow in the terminal."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finflow.clients import LocalIntentClient  # noqa: E402
from finflow.core.config import get_settings  # noqa: E402
from finflow.core.logging import configure_logging  # noqa: E402
from finflow.schemas import FlowPhase  # noqa: E402
from finflow.services import (  # noqa: E402
    FlowOrchestrator,
    FlowSessionStore,
    IntakeAnswerError,
)

Prompt = Callable[[str], str]
SKIP_WORDS = {"skip", "s"}


def _build_orchestrator(db_path: str | None) -> FlowOrchestrator:
    settings = get_settings()
    store = FlowSessionStore(
        db_path=db_path or settings.session.db_path,
        ttl_seconds=settings.session.ttl_seconds,
    )
    return FlowOrchestrator(
        store=store,
        intent_client=LocalIntentClient(),
        summary_field_limit=settings.summary_field_limit,
    )


def _print_values(values: dict[str, float]) -> None:
    for key, value in values.items():
        print(f"  {key}: {value:,.2f}")


def _ask_intake(
    orchestrator: FlowOrchestrator, session_id: str, use_defaults: bool, prompt: Prompt
):
    session = orchestrator.get(session_id)
    if use_defaults and session.phase is FlowPhase.INTAKE:
        return orchestrator.skip_intake(session_id)

    while session.phase is FlowPhase.INTAKE:
        question = orchestrator.current_question(session)
        value = session.intake_values.get(question.key, question.default)
        try:
            raw = prompt(f"{question.question} [{question.format(value)}] ").strip()
        except EOFError:
            raw = "skip"
        if raw.lower() in SKIP_WORDS:
            return orchestrator.skip_intake(session_id)
        try:
            answer_value = float(raw.replace(",", "").lstrip("$")) if raw else value
            session, answer = orchestrator.answer(session_id, answer_value)
        except IntakeAnswerError as exc:
            print(f"  {exc}")
            continue
        except ValueError:
            print("  Please enter a number.")
            continue
        if answer.response:
            print(f"  {answer.response}")
    return session


async def _run(query: str, use_defaults: bool, db_path: str | None, prompt: Prompt) -> int:
    orchestrator = _build_orchestrator(db_path)
    session = await orchestrator.start(query)
    if session.error:
        print(f"Could not classify your question: {session.error}")
        return 1

    print(session.intent.intro_message)
    print()
    session = _ask_intake(orchestrator, session.session_id, use_defaults, prompt)

    flow = orchestrator.flow_for(session)
    print(f"\n{flow.name}: {flow.description}\n")
    for index in range(len(flow.steps)):
        session, computation = orchestrator.goto_step(session.session_id, index)
        view = orchestrator.step_view(computation, total=len(flow.steps))
        print(f"Step {index + 1}/{view.total}: {view.title}")
        if not view.available:
            print(f"  {view.message}\n")
            continue
        _print_values(view.reported)
        print()

    print("Summary")
    for entry in orchestrator.summary(session, orchestrator.summary_field_limit):
        print(f"- {entry.title}")
        _print_values(entry.values)
    orchestrator.reset(session.session_id)
    return 0


def run_once(
    query: str,
    use_defaults: bool = False,
    db_path: str | None = None,
    prompt: Prompt = input,
) -> int:
    return asyncio.run(_run(query, use_defaults, db_path, prompt))


def run_interactive(use_defaults: bool = False, db_path: str | None = None) -> int:
    print("Describe a financial goal. Type 'exit' or 'quit' to end.\n")
    while True:
        try:
            query = input("You: ")
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            return 0
        if query.strip().lower() in {"exit", "quit"}:
            print("Goodbye!")
            return 0
        if not query.strip():
            continue
        run_once(query, use_defaults, db_path)
        print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Walk through the calculators suggested for a financial goal."
    )
    parser.add_argument(
        "query",
        nargs="?",
        help="Goal to plan for. If omitted, interactive mode is started.",
    )
    parser.add_argument(
        "--defaults",
        action="store_true",
        help="Keep the default answer for every intake question.",
    )
    parser.add_argument(
        "--db-path",
        dest="db_path",
        default=None,
        help="Override the session database path.",
    )

    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level, stream=sys.stderr)

    if args.query:
        return run_once(args.query, args.defaults, args.db_path)
    return run_interactive(args.defaults, args.db_path)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
