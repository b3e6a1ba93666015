from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from codeassist_mcp.config import CodeAssistSettings


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., CodeAssistSettings]:
    def factory(**overrides: str) -> CodeAssistSettings:
        values = {
            "ANTHROPIC_API_KEY": "sk-test-key",
            "CLAUDE_CODE_WORKSPACE": str(tmp_path / "workspace"),
        }
        values.update(overrides)
        return CodeAssistSettings(**values)

    return factory


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str], Path]:
    """Write an executable shell script standing in for the claude-code CLI."""

    def factory(body: str, name: str = "claude-code") -> Path:
        script = tmp_path / "bin" / name
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(0o755)
        return script

    return factory
