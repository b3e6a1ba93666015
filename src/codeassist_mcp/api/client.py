"""Minimal async client for the Anthropic Messages endpoint."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import ValidationError

from .models import MessagesResponse

ANTHROPIC_VERSION = "2023-06-01"

logger = logging.getLogger(__name__)


class AnthropicAPIError(RuntimeError):
    """Raised when the Messages API call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class APITimeoutError(AnthropicAPIError):
    """Raised when the Messages API does not answer before the deadline."""


class ResponseParseError(AnthropicAPIError):
    """Raised when a successful response does not match the expected shape."""


class AnthropicMessagesClient:
    """Send single-turn prompts to the Messages API and return the reply text."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        max_tokens: int,
        url: str,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._url = url
        self._deadline = timeout_seconds
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(timeout_seconds or 10.0, 10.0))
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def _payload(self, prompt: str) -> dict[str, object]:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def create_message(self, prompt: str) -> str:
        """POST the prompt and return the text of the first content block."""

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(
                    client.post(self._url, headers=self._headers(), json=self._payload(prompt)),
                    self._deadline,
                )
        except asyncio.TimeoutError as exc:
            logger.warning("Messages API at %s exceeded %ss", self._url, self._deadline)
            raise APITimeoutError(
                f"API request did not finish within {self._deadline:g} seconds"
            ) from exc
        except httpx.TimeoutException as exc:
            logger.warning("Timeout calling Messages API at %s", self._url)
            raise APITimeoutError(f"API request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error calling Messages API at %s: %s", self._url, exc)
            raise AnthropicAPIError(f"API request failed: {exc}") from exc

        if not response.is_success:
            raise AnthropicAPIError(
                f"API error: {response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
            )

        return _extract_text(response)


def _extract_text(response: httpx.Response) -> str:
    try:
        body = MessagesResponse.model_validate(response.json())
    except ValueError as exc:
        # ValidationError is a ValueError, as is a JSON decode failure
        detail = exc.errors()[0]["msg"] if isinstance(exc, ValidationError) else str(exc)
        raise ResponseParseError(
            f"Unexpected API response shape: {detail}", status_code=response.status_code
        ) from exc

    text = body.content[0].text
    if text is None:
        raise ResponseParseError(
            f"First content block of type '{body.content[0].type}' has no text",
            status_code=response.status_code,
        )
    return text
