"""
Completion service clients for the MindMate Relay service.

The relay only depends on the ``CompletionClient`` protocol. The shipped
implementation talks to the Anthropic Messages API over httpx.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

import httpx

from .config import DEFAULT_API_URL, DEFAULT_MODEL
from .errors import UpstreamError
from .models import ChatTurn, Completion

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class CompletionClient(Protocol):
    """Anything that can turn a system prompt and a transcript into a reply."""

    async def send_completion(
        self, api_key: str, system: str, messages: Sequence[ChatTurn]
    ) -> Completion: ...


class AnthropicClient:
    """Completion client for the Anthropic Messages API."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            model: Model id sent with every request
            max_tokens: Completion budget per reply
            api_url: Messages endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.model = model
        self.max_tokens = max_tokens
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def send_completion(
        self, api_key: str, system: str, messages: Sequence[ChatTurn]
    ) -> Completion:
        """
        Send one Messages API request.

        Raises:
            UpstreamError: On transport failure, non-success status, or an
                unexpected response body
        """
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": [turn.model_dump() for turn in messages],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

        logger.info(f"Sending {len(messages)} messages to {self.model}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Completion request failed: {type(e).__name__}: {e}")
            raise UpstreamError() from e

        if not response.is_success:
            logger.error(f"Completion API error: {response.status_code} - {response.text}")
            raise UpstreamError(status_code=response.status_code)

        try:
            data = response.json()
            return Completion(text=data["content"][0]["text"], id=data["id"])
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected completion response: {e}")
            raise UpstreamError(status_code=response.status_code) from e
