"""Task execution service routing between the local CLI and the hosted API."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Literal

from .api import AnthropicAPIError, AnthropicMessagesClient, APITimeoutError
from .assistant import (
    AssistantExecutionResult,
    AssistantRunner,
    AssistantRunnerError,
    AssistantTimeoutError,
    probe_installation,
)
from .assistant.runner import serialize_result
from .config import CodeAssistSettings
from .sessions import SessionLedger
from .tasks import CodingTask, TaskResult, build_api_prompt, format_task_description

TASK_FILENAME = "task.md"

logger = logging.getLogger(__name__)


class CodingAssistantService:
    """Execute coding tasks through claude-code when installed, else via the API.

    The route is chosen by :meth:`initialize` and kept for the lifetime of
    the instance unless ``initialize(reprobe=True)`` is called.
    """

    def __init__(
        self,
        settings: CodeAssistSettings,
        *,
        runner: AssistantRunner | None = None,
        api_client: AnthropicMessagesClient | None = None,
        ledger: SessionLedger | None = None,
        prober: Callable[[Path | None], bool] = probe_installation,
    ) -> None:
        self._settings = settings
        self._runner = runner
        self._api_client = api_client or AnthropicMessagesClient(
            settings.api_key.get_secret_value(),
            model=settings.model,
            max_tokens=settings.max_tokens,
            url=settings.api_url,
            timeout_seconds=settings.timeout_seconds,
        )
        self._ledger = ledger or SessionLedger()
        self._prober = prober
        self._installed = runner is not None
        self._probed = runner is not None

    @property
    def settings(self) -> CodeAssistSettings:
        return self._settings

    @property
    def ledger(self) -> SessionLedger:
        return self._ledger

    @property
    def runner(self) -> AssistantRunner | None:
        return self._runner

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def mode(self) -> Literal["cli", "api"]:
        return "cli" if self._installed else "api"

    def initialize(self, *, reprobe: bool = False) -> bool:
        """Probe for the CLI once and cache the outcome."""

        if self._probed and not reprobe:
            return self._installed

        explicit = Path(self._settings.assistant_path) if self._settings.assistant_path else None
        self._installed = self._prober(explicit)
        self._probed = True
        if self._installed:
            try:
                self._runner = AssistantRunner(explicit)
            except AssistantRunnerError as exc:
                logger.warning("claude-code disappeared after probing: %s", exc)
                self._installed = False
                self._runner = None
        else:
            self._runner = None

        if self._installed:
            logger.info(
                "claude-code CLI detected",
                extra={"executable": str(self._runner.executable) if self._runner else None},
            )
        else:
            logger.warning("claude-code CLI is not installed; tasks will use the Messages API")
        return self._installed

    async def execute_task(self, task: CodingTask) -> TaskResult:
        """Execute ``task`` and return its result; never raises."""

        if not self._probed:
            self.initialize()

        try:
            if self._installed and self._runner is not None:
                return await self._execute_locally(task, self._runner)
            return await self._execute_via_api(task)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error executing task", extra={"task_type": task.type})
            return TaskResult(
                success=False,
                message="Unexpected error while executing task",
                error=str(exc) or exc.__class__.__name__,
            )

    async def _execute_locally(self, task: CodingTask, runner: AssistantRunner) -> TaskResult:
        workspace = self._settings.workspace
        session_id = self._ledger.create(
            task,
            workspace=str(workspace),
            current_directory=os.getcwd(),
        )

        try:
            execution = await self._run_assistant(runner, task, workspace)
        except AssistantTimeoutError as exc:
            logger.warning("claude-code timed out", extra={"session_id": session_id})
            result = TaskResult(success=False, message="Task timed out", error=str(exc))
        except (AssistantRunnerError, OSError) as exc:
            logger.error(
                "Error executing claude-code task",
                extra={"session_id": session_id, "error": str(exc)},
            )
            return TaskResult(success=False, message="Failed to execute task", error=str(exc))
        else:
            result = _result_from_execution(execution)
            logger.info(
                "claude-code task finished",
                extra={"session_id": session_id, "returncode": execution.returncode},
            )
            if not execution.ok:
                logger.debug("claude-code failure detail: %s", serialize_result(execution))

        self._ledger.update(session_id, result)
        return result

    async def _run_assistant(
        self, runner: AssistantRunner, task: CodingTask, workspace: Path
    ) -> AssistantExecutionResult:
        with tempfile.TemporaryDirectory(prefix="codeassist-") as scratch:
            task_file = Path(scratch) / TASK_FILENAME
            task_file.write_text(format_task_description(task), encoding="utf-8")
            return await runner.run_task(
                task_file,
                workspace=workspace,
                model=self._settings.model,
                max_tokens=self._settings.max_tokens,
                api_key=self._settings.api_key.get_secret_value(),
                files=task.files,
                timeout=self._settings.timeout_seconds,
            )

    async def _execute_via_api(self, task: CodingTask) -> TaskResult:
        prompt = build_api_prompt(task)
        try:
            output = await self._api_client.create_message(prompt)
        except APITimeoutError as exc:
            return TaskResult(success=False, message="Task timed out via API", error=str(exc))
        except AnthropicAPIError as exc:
            logger.error(
                "Messages API call failed",
                extra={"status_code": exc.status_code, "error": str(exc)},
            )
            return TaskResult(
                success=False, message="Failed to execute task via API", error=str(exc)
            )

        logger.info("Task completed via Messages API", extra={"task_type": task.type})
        return TaskResult(success=True, message="Task completed using API", output=output)


def _result_from_execution(execution: AssistantExecutionResult) -> TaskResult:
    if execution.ok:
        return TaskResult(
            success=True, message="Task completed successfully", output=execution.stdout
        )
    return TaskResult(
        success=False, message="Task failed", error=execution.stderr or execution.stdout
    )


__all__ = ["CodingAssistantService", "TASK_FILENAME"]
