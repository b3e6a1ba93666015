from __future__ import annotations

import pytest
from pydantic import ValidationError

from codeassist_mcp.tasks import (
    CodingTask,
    TaskResult,
    build_api_prompt,
    format_task_description,
    render_result,
)


def test_markdown_lists_each_file() -> None:
    task = CodingTask(type="edit", description="Rename helpers", files=["a.py", "b.py"])

    document = format_task_description(task)

    assert document.startswith("# Claude Code Task\n\n")
    assert "**Type:** edit" in document
    assert "**Description:** Rename helpers" in document
    assert "**Files:**\n- a.py\n- b.py" in document
    lines = document.splitlines()
    assert "- a.py" in lines and "- b.py" in lines


def test_markdown_without_files_has_no_files_section() -> None:
    task = CodingTask(type="create", description="Write a fibonacci script")

    document = format_task_description(task)

    assert "Files" not in document
    assert "Language" not in document
    assert "Context" not in document


def test_markdown_includes_language_and_context() -> None:
    task = CodingTask(
        type="fix",
        description="Fix the crash",
        language="python",
        context="Traceback points at main.py",
    )

    document = format_task_description(task)

    assert "**Language:** python" in document
    assert "**Context:**\nTraceback points at main.py" in document


def test_api_prompt_omits_unset_language() -> None:
    task = CodingTask(type="review", description="Review the parser", files=["parser.py"])

    prompt = build_api_prompt(task)

    assert prompt == "Task: review\nDescription: Review the parser\n"
    assert "parser.py" not in prompt


def test_api_prompt_includes_language_verbatim() -> None:
    task = CodingTask(type="explain", description="Explain closures", language="TypeScript", context="beginner")

    prompt = build_api_prompt(task)

    assert prompt.splitlines() == [
        "Task: explain",
        "Description: Explain closures",
        "Language: TypeScript",
        "Context: beginner",
    ]


def test_formatters_are_deterministic() -> None:
    task = CodingTask(type="test", description="Add tests", files=["x.py"], language="python")

    assert format_task_description(task) == format_task_description(task)
    assert build_api_prompt(task) == build_api_prompt(task)


def test_task_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        CodingTask(type="deploy", description="Ship it")


def test_task_is_immutable() -> None:
    task = CodingTask(type="create", description="Create a module", files=["m.py"])

    with pytest.raises(ValidationError):
        task.description = "changed"  # type: ignore[misc]
    assert task.files == ("m.py",)


def test_render_result_success_and_failure() -> None:
    ok = TaskResult(success=True, message="Task completed successfully", output="done")
    failed = TaskResult(success=False, message="Task failed")

    assert render_result(ok) == "✅ Task completed successfully\n\ndone"
    assert render_result(failed) == "❌ Task failed\n\nError: Unknown error occurred."
