"""FastMCP server bootstrap for the coding assistant."""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastmcp import FastMCP

from . import __version__
from .api import AnthropicMessagesClient
from .assistant import AssistantRunner
from .config import CodeAssistSettings, load_settings
from .service import CodingAssistantService
from .sessions import render_recent_sessions
from .tools import register_tools


def configure_logging(level: str) -> None:
    """Configure root logging for the server."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def _run_sync(coro):
    """Execute an async coroutine on a dedicated event loop."""

    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


VERSION_PROBE_TIMEOUT_SECONDS = 10.0


def _probe_version(
    runner: AssistantRunner, timeout: float = VERSION_PROBE_TIMEOUT_SECONDS
) -> dict[str, Any]:
    metadata: dict[str, Any] = {"version": None, "error": None}
    try:
        version_result = _run_sync(runner.version(timeout=timeout))
    except Exception as exc:  # noqa: BLE001
        metadata["error"] = str(exc)
        return metadata
    if version_result.ok:
        metadata["version"] = version_result.stdout.strip()
    else:
        metadata["error"] = (
            version_result.stderr.strip() or "claude-code --version exited with an error"
        )
    return metadata


def build_status_payload(
    service: CodingAssistantService,
    assistant_metadata: dict[str, Any],
    *,
    request_id: Any = None,
) -> dict[str, Any]:
    """Summarize runtime state; the API key is never included."""

    settings = service.settings
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "server_version": __version__,
        "log_level": settings.log_level,
        "mode": service.mode,
        "assistant": {
            "path": settings.assistant_path,
            "executable": str(service.runner.executable) if service.runner else None,
            **assistant_metadata,
        },
        "model": settings.model,
        "max_tokens": settings.max_tokens,
        "timeout_seconds": settings.timeout_seconds,
        "workspace": str(settings.workspace),
        "api_url": settings.api_url,
        "sessions": {"count": len(service.ledger)},
        "request_id": request_id,
    }


def create_server(
    settings: Optional[CodeAssistSettings] = None,
    *,
    runner: AssistantRunner | None = None,
    api_client: AnthropicMessagesClient | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server with its tools and resources."""

    settings = settings or load_settings()

    service = CodingAssistantService(settings, runner=runner, api_client=api_client)
    service.initialize()

    assistant_metadata: dict[str, Any] = {
        "available": service.installed,
        "version": None,
        "error": None,
    }
    if service.runner is not None:
        assistant_metadata.update(
            _probe_version(
                service.runner,
                timeout=min(settings.timeout_seconds, VERSION_PROBE_TIMEOUT_SECONDS),
            )
        )

    server = FastMCP(
        name="Code Assist MCP",
        version=__version__,
        instructions=(
            "Delegates coding tasks to the claude-code CLI when it is installed, or to the "
            "Anthropic Messages API otherwise. Use run_coding_task for work and the session "
            "tools and resources to review what has been done."
        ),
    )

    handles = register_tools(server, service=service)

    @server.resource(
        "resource://codeassist/status",
        name="codeassist_status",
        description="Current runtime status of the coding assistant server.",
        mime_type="application/json",
        tags={"status", "health"},
    )
    def status_resource() -> str:
        """Return a JSON string summarizing runtime state."""

        return json.dumps(build_status_payload(service, assistant_metadata))

    @server.resource(
        "resource://codeassist/recent-sessions",
        name="codeassist_recent_sessions",
        description="The three most recent coding sessions, formatted as prompt context.",
        mime_type="text/plain",
        tags={"sessions", "context"},
    )
    def recent_sessions_resource() -> str:
        return render_recent_sessions(service.ledger.list())

    setattr(server, "assistant_service", service)
    setattr(server, "assistant_metadata", assistant_metadata)
    setattr(server, "tool_handles", handles)
    return server


def main() -> None:
    """Entry point for running the server via CLI."""

    settings = load_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching Code Assist MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "assistant_available": getattr(server, "assistant_metadata", {}).get("available"),
        },
    )
    server.run()


if __name__ == "__main__":
    main()
