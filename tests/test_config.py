from __future__ import annotations

from pathlib import Path

import pytest

from codeassist_mcp.config import (
    DEFAULT_API_URL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    ConfigError,
    load_settings,
)

_ENV_KEYS = (
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_API_URL",
    "CLAUDE_CODE_WORKSPACE",
    "CLAUDE_CODE_MODEL",
    "CLAUDE_CODE_MAX_TOKENS",
    "CLAUDE_CODE_PATH",
    "CLAUDE_CODE_TIMEOUT_SECONDS",
    "CODEASSIST_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_missing_api_key_fails_fast() -> None:
    with pytest.raises(ConfigError, match="ANTHROPIC_API_KEY"):
        load_settings()


def test_blank_api_key_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "   ")
    with pytest.raises(ConfigError):
        load_settings()


def test_defaults_applied(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")

    settings = load_settings()

    assert settings.api_key.get_secret_value() == "sk-env"
    assert settings.workspace == Path.cwd()
    assert settings.model == DEFAULT_MODEL
    assert settings.max_tokens == DEFAULT_MAX_TOKENS
    assert settings.log_level == "INFO"


def test_lookup_takes_precedence_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv("CLAUDE_CODE_MODEL", "env-model")
    host_settings = {"ANTHROPIC_API_KEY": "sk-host", "CLAUDE_CODE_MAX_TOKENS": "2048"}

    settings = load_settings(host_settings.get)

    assert settings.api_key.get_secret_value() == "sk-host"
    assert settings.model == "env-model"
    assert settings.max_tokens == 2048


@pytest.mark.parametrize("raw", ["", "not-a-number", "nan", "NaN", "inf"])
def test_max_tokens_falls_back_when_not_numeric(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv("CLAUDE_CODE_MAX_TOKENS", raw)

    assert load_settings().max_tokens == DEFAULT_MAX_TOKENS


@pytest.mark.parametrize(
    ("key", "attribute", "expected"),
    [
        ("ANTHROPIC_API_URL", "api_url", DEFAULT_API_URL),
        ("CLAUDE_CODE_TIMEOUT_SECONDS", "timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        ("CODEASSIST_LOG_LEVEL", "log_level", "INFO"),
        ("CLAUDE_CODE_MODEL", "model", DEFAULT_MODEL),
        ("CLAUDE_CODE_PATH", "assistant_path", None),
    ],
)
def test_blank_values_fall_back_to_defaults(
    monkeypatch: pytest.MonkeyPatch, key: str, attribute: str, expected: object
) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv(key, "  ")

    assert getattr(load_settings(), attribute) == expected


def test_max_tokens_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv("CLAUDE_CODE_MAX_TOKENS", "0")

    with pytest.raises(ConfigError, match="CLAUDE_CODE_MAX_TOKENS"):
        load_settings()


def test_invalid_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv("CODEASSIST_LOG_LEVEL", "verbose")

    with pytest.raises(ConfigError, match="CODEASSIST_LOG_LEVEL"):
        load_settings()


def test_settings_are_immutable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    settings = load_settings()

    with pytest.raises(Exception):
        settings.model = "other"  # type: ignore[misc]


def test_api_key_hidden_from_repr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-very-secret")

    assert "sk-very-secret" not in repr(load_settings())
