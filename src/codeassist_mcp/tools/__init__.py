"""Tool registration for the coding assistant MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastmcp import Context, FastMCP
from pydantic import ValidationError

from ..relevance import is_coding_request, score_coding_relevance
from ..service import CodingAssistantService
from ..sessions import Session, recent_sessions
from ..tasks import CodingTask, render_result


@dataclass(slots=True)
class ToolHandles:
    run_coding_task: Any
    score_coding_relevance: Any
    list_sessions: Any
    get_session: Any
    clear_sessions: Any


def _session_summary(session: Session) -> dict[str, Any]:
    latest = session.results[-1] if session.results else None
    return {
        "session_id": session.id,
        "started_at": session.start_time.isoformat(),
        "ended_at": session.end_time.isoformat() if session.end_time else None,
        "task_types": [task.type for task in session.tasks],
        "description": session.tasks[0].description if session.tasks else None,
        "success": latest.success if latest else None,
        "message": latest.message if latest else None,
    }


def register_tools(server: FastMCP, *, service: CodingAssistantService) -> ToolHandles:
    """Register the coding assistant tools on the server."""

    ledger = service.ledger

    async def _run_coding_task(
        task_type: str,
        description: str,
        *,
        files: list[str] | None = None,
        language: str | None = None,
        task_context: str | None = None,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Delegate a coding task to claude-code, or the Messages API when the CLI is absent."""

        try:
            task = CodingTask(
                type=task_type,
                description=description,
                files=files,
                language=language,
                context=task_context,
            )
        except ValidationError as exc:
            raise ValueError(f"Invalid coding task: {exc.errors()[0]['msg']}") from exc

        _emit_log(
            context,
            "info",
            "Coding task received",
            extra={"task_type": task.type, "mode": service.mode},
        )

        result = await service.execute_task(task)

        _emit_log(
            context,
            "info" if result.success else "warning",
            "Coding task finished",
            extra={"task_type": task.type, "success": result.success},
        )

        return {
            "success": result.success,
            "message": result.message,
            "text": render_result(result),
            "result": result.model_dump(exclude_none=True),
        }

    def _score_coding_relevance(text: str, context: Context | None = None) -> dict[str, Any]:
        """Score how likely a message is a coding request."""

        score = score_coding_relevance(text)
        _emit_log(context, "debug", "Scored coding relevance", extra={"score": score})
        return {"score": score, "is_coding_request": is_coding_request(text)}

    tool_run = server.tool(
        name="run_coding_task",
        description=(
            "Delegate a coding task (create, edit, refactor, review, explain, fix, test) "
            "to the claude-code CLI, falling back to the Anthropic Messages API when the "
            "CLI is not installed. Returns the outcome and a display-ready text."
        ),
    )(_run_coding_task)

    tool_score = server.tool(
        name="score_coding_relevance",
        description="Estimate (0.1-0.95) whether a message asks for coding assistance.",
    )(_score_coding_relevance)

    def _list_sessions(limit: int | None = None, context: Context | None = None) -> list[dict[str, Any]]:
        """List recorded sessions, newest first."""

        sessions = recent_sessions(ledger.list(), limit)
        _emit_log(context, "debug", "Listing sessions", extra={"count": len(sessions)})
        return [_session_summary(session) for session in sessions]

    def _get_session(session_id: str, context: Context | None = None) -> dict[str, Any]:
        """Return the full record for one session."""

        session = ledger.get(session_id)
        if session is None:
            raise ValueError(f"Session '{session_id}' not found")
        _emit_log(context, "debug", "Fetched session", extra={"session_id": session_id})
        return session.to_dict()

    def _clear_sessions(context: Context | None = None) -> dict[str, Any]:
        """Drop every recorded session."""

        cleared = ledger.clear()
        _emit_log(context, "warning", "Cleared sessions", extra={"cleared": cleared})
        return {"cleared": cleared}

    tool_list = server.tool(
        name="list_sessions",
        description="List recorded coding sessions, newest first (optionally limited).",
    )(_list_sessions)

    tool_get = server.tool(
        name="get_session",
        description="Fetch a recorded coding session with its task, result, and context.",
    )(_get_session)

    tool_clear = server.tool(
        name="clear_sessions",
        description="Discard all recorded coding sessions. This cannot be undone.",
    )(_clear_sessions)

    return ToolHandles(
        run_coding_task=tool_run,
        score_coding_relevance=tool_score,
        list_sessions=tool_list,
        get_session=tool_get,
        clear_sessions=tool_clear,
    )


__all__ = ["register_tools", "ToolHandles"]

logger = logging.getLogger(__name__)


def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log through the MCP context logger when available, else the module logger."""

    payload = extra or {}

    if context is not None:
        ctx_logger = getattr(context, "logger", None)
        if ctx_logger is not None:
            log_method = getattr(ctx_logger, level, None)
            if callable(log_method):
                log_method(message, extra=payload)
                return

    fallback = getattr(logger, level, logger.info)
    fallback(message, extra=payload)
