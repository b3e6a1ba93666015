"""Coding task models and formatting exports."""

from .formatting import build_api_prompt, format_task_description, render_result
from .models import TASK_TYPES, CodingTask, FileChange, TaskResult, TaskType

__all__ = [
    "CodingTask",
    "FileChange",
    "TASK_TYPES",
    "TaskResult",
    "TaskType",
    "build_api_prompt",
    "format_task_description",
    "render_result",
]
