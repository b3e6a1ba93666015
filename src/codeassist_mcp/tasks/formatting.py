"""Rendering helpers turning tasks and results into text."""

from __future__ import annotations

from .models import CodingTask, TaskResult


def build_api_prompt(task: CodingTask) -> str:
    """Render a task as the user message sent to the Messages API.

    The file list is deliberately left out; the API has no access to the
    workspace.
    """

    lines = [f"Task: {task.type}", f"Description: {task.description}"]
    if task.language:
        lines.append(f"Language: {task.language}")
    if task.context:
        lines.append(f"Context: {task.context}")
    return "\n".join(lines) + "\n"


def format_task_description(task: CodingTask) -> str:
    """Render a task as the markdown document handed to the CLI."""

    sections = [
        "# Claude Code Task",
        f"**Type:** {task.type}",
        f"**Description:** {task.description}",
    ]
    if task.language:
        sections.append(f"**Language:** {task.language}")
    if task.context:
        sections.append("**Context:**\n" + task.context)
    if task.files:
        sections.append("**Files:**\n" + "\n".join(f"- {path}" for path in task.files))

    return "\n\n".join(sections) + "\n\n"


def render_result(result: TaskResult) -> str:
    if result.success:
        return f"✅ {result.message}\n\n{result.output or 'Task completed successfully.'}"
    return f"❌ {result.message}\n\nError: {result.error or 'Unknown error occurred.'}"


__all__ = ["build_api_prompt", "format_task_description", "render_result"]
