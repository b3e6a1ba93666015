"""Utility helpers for the assistant runner."""

from __future__ import annotations

import os
from typing import Mapping

_SANITIZED_VARS = {
    "PYTHONHOME",
    "PYTHONPATH",
    "VIRTUAL_ENV",
    "PIP_RESPECT_VIRTUALENV",
}

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"


def sanitize_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a sanitized environment suitable for subprocess execution."""

    env = dict(os.environ)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    if additional:
        env.update(additional)
    return env


def build_task_arguments(
    task_file: str,
    *,
    workspace: str,
    model: str,
    max_tokens: int,
    files: tuple[str, ...] | list[str] | None = None,
) -> list[str]:
    """Build the CLI arguments for a single task run."""

    args = [
        "--task",
        task_file,
        "--workspace",
        workspace,
        "--model",
        model,
        "--max-tokens",
        str(max_tokens),
    ]
    if files:
        args.extend(["--files", *files])
    return args
