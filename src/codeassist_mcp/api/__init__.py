"""Hosted Messages API fallback."""

from .client import (
    ANTHROPIC_VERSION,
    AnthropicAPIError,
    AnthropicMessagesClient,
    APITimeoutError,
    ResponseParseError,
)
from .models import ContentBlock, MessagesResponse

__all__ = [
    "ANTHROPIC_VERSION",
    "APITimeoutError",
    "AnthropicAPIError",
    "AnthropicMessagesClient",
    "ContentBlock",
    "MessagesResponse",
    "ResponseParseError",
]
