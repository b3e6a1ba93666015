"""Async runner for the claude-code CLI."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from .utils import API_KEY_ENV_VAR, build_task_arguments, sanitize_environment

EXECUTABLE_NAME = "claude-code"
_READ_CHUNK = 4096

logger = logging.getLogger(__name__)


class AssistantRunnerError(RuntimeError):
    """Base class for assistant runner errors."""


class AssistantNotFoundError(AssistantRunnerError):
    """Raised when the claude-code executable cannot be located."""


class AssistantTimeoutError(AssistantRunnerError):
    """Raised when the CLI does not exit before the deadline."""


@dataclass(slots=True)
class AssistantExecutionResult:
    """Holds the outcome of a CLI invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def probe_installation(explicit: Path | str | None = None) -> bool:
    """Report whether the CLI can be located, never raising."""

    try:
        AssistantRunner._resolve_executable(Path(explicit) if explicit else None)
    except (AssistantNotFoundError, OSError) as exc:
        logger.debug("claude-code probe failed: %s", exc)
        return False
    return True


class AssistantRunner:
    """Execute claude-code CLI commands asynchronously."""

    def __init__(self, executable: Path | None = None) -> None:
        self._executable_path = self._resolve_executable(executable)

    @staticmethod
    def _resolve_executable(explicit: Path | None) -> Path:
        if explicit is not None:
            candidate = Path(explicit)
            if candidate.exists() and candidate.is_file():
                return candidate
            raise AssistantNotFoundError(f"claude-code executable not found at {candidate}")

        binary = shutil.which(EXECUTABLE_NAME)
        if binary is None:
            raise AssistantNotFoundError("claude-code CLI executable not found on PATH")
        return Path(binary)

    @property
    def executable(self) -> Path:
        return self._executable_path

    async def version(self, timeout: float | None = None) -> AssistantExecutionResult:
        return await self._invoke("--version", timeout=timeout)

    async def run_task(
        self,
        task_file: Path,
        *,
        workspace: Path,
        model: str,
        max_tokens: int,
        api_key: str,
        files: Sequence[str] | None = None,
        timeout: float | None = None,
    ) -> AssistantExecutionResult:
        """Run one task file; the API key travels in the child environment only."""

        args = build_task_arguments(
            str(task_file),
            workspace=str(workspace),
            model=model,
            max_tokens=max_tokens,
            files=list(files) if files else None,
        )
        return await self._invoke(*args, env={API_KEY_ENV_VAR: api_key}, timeout=timeout)

    async def _invoke(
        self,
        *args: str,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> AssistantExecutionResult:
        cmd = [str(self._executable_path), *args]
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=sanitize_environment(env),
            )
        except OSError as exc:
            raise AssistantRunnerError(f"Failed to launch {self._executable_path}: {exc}") from exc

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []

        async def _collect() -> int:
            await asyncio.gather(
                _drain(process.stdout, stdout_chunks),
                _drain(process.stderr, stderr_chunks),
            )
            return await process.wait()

        try:
            returncode = await asyncio.wait_for(_collect(), timeout)
        except asyncio.TimeoutError as exc:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise AssistantTimeoutError(
                f"claude-code did not finish within {timeout:g} seconds"
            ) from exc

        stdout = b"".join(stdout_chunks).decode("utf-8", errors="replace")
        stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
        return AssistantExecutionResult(
            args=tuple(cmd), returncode=returncode, stdout=stdout, stderr=stderr
        )


async def _drain(stream: asyncio.StreamReader | None, sink: list[bytes]) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        sink.append(chunk)


class FakeAssistantRunner(AssistantRunner):
    """Test double that simulates CLI responses."""

    def __init__(self, responses: Iterable[AssistantExecutionResult] | None = None) -> None:  # type: ignore[override]
        self._responses = list(responses or [])
        self._invocations: list[tuple[str, ...]] = []
        self._environments: list[dict[str, str]] = []
        self._executable_path = Path("/tmp/fake-claude-code")

    async def _invoke(  # type: ignore[override]
        self,
        *args: str,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> AssistantExecutionResult:
        self._invocations.append(tuple(args))
        self._environments.append(dict(env or {}))
        if self._responses:
            return self._responses.pop(0)
        return AssistantExecutionResult(args=tuple(args), returncode=0, stdout="", stderr="")

    @property
    def invocations(self) -> list[tuple[str, ...]]:
        return self._invocations

    @property
    def environments(self) -> list[dict[str, str]]:
        return self._environments


def serialize_result(result: AssistantExecutionResult) -> str:
    """Serialize a command result for logging."""

    return json.dumps(
        {
            "args": list(result.args),
            "returncode": result.returncode,
            "stdout": result.stdout,
            "stderr": result.stderr,
        }
    )
