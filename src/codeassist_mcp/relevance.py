"""Keyword heuristics deciding whether a message asks for coding help."""

from __future__ import annotations

CODING_KEYWORDS = (
    "code", "script", "function", "class", "program",
    "refactor", "review", "fix", "debug", "test",
    "create", "build", "implement", "develop",
    "python", "javascript", "typescript", "java", "c++",
    "html", "css", "react", "vue", "angular",
)

STRONG_INDICATORS = (
    "write code", "create function", "implement", "refactor",
    "debug", "fix bug", "review code", "test code",
    "optimize", "class", "method", "algorithm",
)

LANGUAGES = (
    "python", "javascript", "typescript", "java", "c++",
    "rust", "go", "ruby", "php", "swift", "kotlin",
)


def is_coding_request(text: str) -> bool:
    content = text.lower()
    return any(keyword in content for keyword in CODING_KEYWORDS)


def score_coding_relevance(text: str) -> float:
    """Score in [0.1, 0.95] for how likely ``text`` is a coding task.

    Matching is plain substring search, so short language names such as
    ``go`` also match inside longer words.
    """

    content = text.lower()
    has_indicator = any(indicator in content for indicator in STRONG_INDICATORS)
    has_language = any(language in content for language in LANGUAGES)

    if has_indicator and has_language:
        return 0.95
    if has_indicator:
        return 0.8
    if has_language:
        return 0.6
    if "code" in content or "function" in content:
        return 0.4
    return 0.1


__all__ = ["CODING_KEYWORDS", "LANGUAGES", "STRONG_INDICATORS", "is_coding_request", "score_coding_relevance"]
