"""claude-code CLI orchestration utilities."""

from .runner import (
    EXECUTABLE_NAME,
    AssistantExecutionResult,
    AssistantNotFoundError,
    AssistantRunner,
    AssistantRunnerError,
    AssistantTimeoutError,
    probe_installation,
)

__all__ = [
    "EXECUTABLE_NAME",
    "AssistantExecutionResult",
    "AssistantNotFoundError",
    "AssistantRunner",
    "AssistantRunnerError",
    "AssistantTimeoutError",
    "probe_installation",
]
