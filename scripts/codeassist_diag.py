"""Code Assist MCP diagnostics CLI."""

from __future__ import annotations

import argparse
import json

from pydantic import ValidationError

from codeassist_mcp.assistant import EXECUTABLE_NAME, probe_installation
from codeassist_mcp.config import CodeAssistSettings, ConfigError, load_settings
from codeassist_mcp.relevance import is_coding_request, score_coding_relevance
from codeassist_mcp.tasks import CodingTask, build_api_prompt, format_task_description


def load_config() -> CodeAssistSettings:
    try:
        return load_settings()
    except ConfigError as exc:
        print(f"Configuration invalid: {exc}")
        raise SystemExit(1)


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}...{secret[-4:]}"


def cmd_config(args: argparse.Namespace) -> None:
    settings = load_config()
    payload = {
        "api_key": _mask(settings.api_key.get_secret_value()),
        "api_url": settings.api_url,
        "workspace": str(settings.workspace),
        "model": settings.model,
        "max_tokens": settings.max_tokens,
        "assistant_path": settings.assistant_path,
        "timeout_seconds": settings.timeout_seconds,
        "log_level": settings.log_level,
    }
    print(json.dumps(payload, indent=2))


def cmd_probe(args: argparse.Namespace) -> None:
    installed = probe_installation(args.path)
    payload = {
        "executable": args.path or EXECUTABLE_NAME,
        "installed": installed,
        "mode": "cli" if installed else "api",
    }
    print(json.dumps(payload, indent=2))
    if not installed and args.strict:
        raise SystemExit(1)


def cmd_render(args: argparse.Namespace) -> None:
    try:
        task = CodingTask(
            type=args.type,
            description=args.description,
            files=args.files,
            language=args.language,
            context=args.context,
        )
    except ValidationError as exc:
        print(f"Invalid task: {exc.errors()[0]['msg']}")
        raise SystemExit(1)

    if args.format == "prompt":
        print(build_api_prompt(task), end="")
    else:
        print(format_task_description(task), end="")


def cmd_score(args: argparse.Namespace) -> None:
    payload = {
        "score": score_coding_relevance(args.text),
        "is_coding_request": is_coding_request(args.text),
    }
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Code Assist MCP diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_config = sub.add_parser("config", help="Show validated configuration (API key masked)")
    p_config.set_defaults(func=cmd_config)

    p_probe = sub.add_parser("probe", help="Check whether the claude-code CLI is installed")
    p_probe.add_argument("--path", default=None, help="Explicit executable path to check")
    p_probe.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when the CLI is missing",
    )
    p_probe.set_defaults(func=cmd_probe)

    p_render = sub.add_parser("render", help="Render a task as API prompt or CLI task file")
    p_render.add_argument("type")
    p_render.add_argument("description")
    p_render.add_argument("--files", nargs="*", default=None)
    p_render.add_argument("--language")
    p_render.add_argument("--context")
    p_render.add_argument("--format", choices=("prompt", "markdown"), default="markdown")
    p_render.set_defaults(func=cmd_render)

    p_score = sub.add_parser("score", help="Score how likely a message is a coding request")
    p_score.add_argument("text")
    p_score.set_defaults(func=cmd_score)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
