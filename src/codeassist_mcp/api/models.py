"""Response schema for the Anthropic Messages API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContentBlock(BaseModel):
    """One block of a message's content; only text blocks carry ``text``."""

    model_config = ConfigDict(extra="allow")

    type: str = "text"
    text: str | None = None


class MessagesResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: list[ContentBlock] = Field(..., min_length=1)


__all__ = ["ContentBlock", "MessagesResponse"]
