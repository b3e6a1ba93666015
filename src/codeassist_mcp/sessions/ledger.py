"""Thread-safe in-memory ledger of executed tasks."""

from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from ..tasks import CodingTask, TaskResult
from .models import Session, SessionContext

logger = logging.getLogger(__name__)


class SessionLedger:
    """Record tasks and results under session ids.

    Nothing is persisted; a new process starts with an empty ledger. Callers
    only ever receive copies of the stored sessions.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(
        self,
        task: CodingTask,
        *,
        workspace: str,
        current_directory: str,
    ) -> str:
        started_at = self._clock()
        session_id = f"session-{started_at.strftime('%Y%m%d%H%M%S')}-{uuid4().hex[:12]}"
        session = Session(
            id=session_id,
            start_time=started_at,
            tasks=[task],
            context=SessionContext(
                workspace=workspace,
                current_directory=current_directory,
                recent_files=list(task.files or ()),
                session_id=session_id,
            ),
        )
        with self._lock:
            self._sessions[session_id] = session
        return session_id

    def update(self, session_id: str, result: TaskResult) -> None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                logger.debug("Ignoring result for unknown session", extra={"session_id": session_id})
                return
            if len(session.results) >= len(session.tasks):
                logger.warning(
                    "Session already holds a result for every task",
                    extra={"session_id": session_id},
                )
                return
            session.results.append(result)
            session.end_time = max(self._clock(), session.start_time)

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return copy.deepcopy(session) if session is not None else None

    def list(self) -> list[Session]:
        with self._lock:
            return [copy.deepcopy(session) for session in self._sessions.values()]

    def clear(self) -> int:
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        return count


__all__ = ["SessionLedger"]
