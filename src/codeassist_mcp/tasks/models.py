"""Task and result models exchanged with the coding assistant."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TaskType = Literal["create", "edit", "refactor", "review", "explain", "fix", "test"]
TASK_TYPES: tuple[str, ...] = ("create", "edit", "refactor", "review", "explain", "fix", "test")


class CodingTask(BaseModel):
    """A structured coding request."""

    model_config = ConfigDict(frozen=True)

    type: TaskType = Field(..., description="Kind of work requested from the assistant.")
    description: str = Field(..., description="What needs to be done.")
    files: tuple[str, ...] | None = Field(
        default=None,
        description="Files the task concerns, in the order given by the requester.",
    )
    language: str | None = Field(default=None, description="Programming language, if known.")
    context: str | None = Field(default=None, description="Additional free-form context.")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("description")
    @classmethod
    def _require_description(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Task description must not be empty")
        return normalized

    @field_validator("files", mode="before")
    @classmethod
    def _ensure_files(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            raise ValueError("files must be a sequence of paths, not a single string")
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise ValueError("files must be a sequence of paths")

    @field_validator("language", "context")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value


class FileChange(BaseModel):
    """A file touched by the assistant while completing a task."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    action: Literal["created", "modified", "deleted"]


class TaskResult(BaseModel):
    """Outcome of executing a single task."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    output: str | None = None
    error: str | None = None
    files: tuple[FileChange, ...] | None = None


__all__ = ["CodingTask", "FileChange", "TASK_TYPES", "TaskResult", "TaskType"]
