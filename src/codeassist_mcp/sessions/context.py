"""Render recent sessions as prompt context for the host agent."""

from __future__ import annotations

from typing import Iterable

from .models import Session

RECENT_SESSION_LIMIT = 3


def recent_sessions(sessions: Iterable[Session], limit: int | None = RECENT_SESSION_LIMIT) -> list[Session]:
    ordered = sorted(sessions, key=lambda session: session.start_time, reverse=True)
    if limit is not None and limit >= 0:
        ordered = ordered[:limit]
    return ordered


def render_recent_sessions(sessions: Iterable[Session], limit: int = RECENT_SESSION_LIMIT) -> str:
    """Return the newest sessions as plain text, or an empty string if there are none."""

    selected = recent_sessions(sessions, limit)
    if not selected:
        return ""

    lines = ["Recent Claude Code Sessions:", ""]
    for session in selected:
        lines.append(f"Session {session.id} ({session.start_time.isoformat(timespec='seconds')}):")
        for index, task in enumerate(session.tasks):
            lines.append(f"  Task: {task.type} - {task.description}")
            if index < len(session.results):
                result = session.results[index]
                status = "Success" if result.success else "Failed"
                lines.append(f"  Result: {status} - {result.message}")
        lines.append("")

    return "\n".join(lines).strip()


__all__ = ["RECENT_SESSION_LIMIT", "recent_sessions", "render_recent_sessions"]
