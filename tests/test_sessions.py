from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

from codeassist_mcp.sessions import SessionLedger, render_recent_sessions
from codeassist_mcp.tasks import CodingTask, TaskResult


class StepClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def _task(description: str = "Write a parser", **kwargs) -> CodingTask:
    return CodingTask(type="create", description=description, **kwargs)


def _create(ledger: SessionLedger, task: CodingTask | None = None) -> str:
    return ledger.create(task or _task(), workspace="/work", current_directory="/cwd")


def test_create_then_update_records_result() -> None:
    ledger = SessionLedger(clock=StepClock())
    session_id = _create(ledger, _task(files=["a.py"]))

    pending = ledger.get(session_id)
    assert pending is not None
    assert pending.results == []
    assert pending.end_time is None
    assert pending.context.recent_files == ["a.py"]
    assert pending.context.session_id == session_id

    ledger.update(session_id, TaskResult(success=True, message="ok"))

    session = ledger.get(session_id)
    assert session is not None
    assert len(session.results) == 1
    assert session.end_time is not None
    assert session.end_time >= session.start_time


def test_update_unknown_session_is_noop() -> None:
    ledger = SessionLedger()

    ledger.update("session-missing", TaskResult(success=False, message="x"))

    assert ledger.list() == []


def test_results_never_outnumber_tasks() -> None:
    ledger = SessionLedger()
    session_id = _create(ledger)

    ledger.update(session_id, TaskResult(success=True, message="first"))
    ledger.update(session_id, TaskResult(success=True, message="second"))

    session = ledger.get(session_id)
    assert session is not None
    assert [result.message for result in session.results] == ["first"]


def test_get_returns_copies() -> None:
    ledger = SessionLedger()
    session_id = _create(ledger)

    copy = ledger.get(session_id)
    assert copy is not None
    copy.results.append(TaskResult(success=True, message="tampered"))

    stored = ledger.get(session_id)
    assert stored is not None and stored.results == []


def test_session_ids_are_unique() -> None:
    frozen = datetime(2025, 1, 1, tzinfo=timezone.utc)
    ledger = SessionLedger(clock=lambda: frozen)

    ids = {_create(ledger) for _ in range(200)}

    assert len(ids) == 200


def test_clear_drops_everything() -> None:
    ledger = SessionLedger()
    _create(ledger)
    _create(ledger)

    assert ledger.clear() == 2
    assert len(ledger) == 0
    assert ledger.list() == []


def test_concurrent_creates_are_all_recorded() -> None:
    ledger = SessionLedger()

    def worker() -> None:
        for _ in range(50):
            session_id = _create(ledger)
            ledger.update(session_id, TaskResult(success=True, message="ok"))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    sessions = ledger.list()
    assert len(sessions) == 400
    assert all(len(session.results) == 1 for session in sessions)


def test_render_recent_sessions_newest_first_and_limited() -> None:
    ledger = SessionLedger(clock=StepClock())
    ids = [_create(ledger, _task(f"task {index}")) for index in range(5)]
    ledger.update(ids[4], TaskResult(success=True, message="Task completed successfully"))
    ledger.update(ids[3], TaskResult(success=False, message="Task failed"))

    text = render_recent_sessions(ledger.list())

    lines = text.splitlines()
    assert lines[0] == "Recent Claude Code Sessions:"
    assert "  Task: create - task 4" in lines
    assert "  Result: Success - Task completed successfully" in lines
    assert "  Result: Failed - Task failed" in lines
    assert "task 1" not in text and "task 0" not in text
    assert text.index("task 4") < text.index("task 3") < text.index("task 2")


def test_render_recent_sessions_empty() -> None:
    assert render_recent_sessions([]) == ""
