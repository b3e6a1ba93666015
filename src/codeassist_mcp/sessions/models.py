"""Data models for in-memory session tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..tasks import CodingTask, TaskResult


@dataclass(slots=True)
class SessionContext:
    workspace: str
    current_directory: str
    recent_files: list[str]
    session_id: str


@dataclass(slots=True)
class Session:
    """One delegated task and its result, with timing metadata."""

    id: str
    start_time: datetime
    context: SessionContext
    tasks: list[CodingTask] = field(default_factory=list)
    results: list[TaskResult] = field(default_factory=list)
    end_time: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "tasks": [task.model_dump(exclude_none=True) for task in self.tasks],
            "results": [result.model_dump(exclude_none=True) for result in self.results],
            "context": {
                "workspace": self.context.workspace,
                "current_directory": self.context.current_directory,
                "recent_files": list(self.context.recent_files),
                "session_id": self.context.session_id,
            },
        }


__all__ = ["Session", "SessionContext"]
