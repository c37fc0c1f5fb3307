"""
Conversation relay for the MindMate Relay service.

This module forwards a user message and its preceding transcript to the
completion service under the fixed MindMate system prompt.
"""

import logging
from collections.abc import Sequence

from .errors import ConfigurationError, UpstreamError, ValidationError
from .llm import CompletionClient
from .models import ChatTurn, Completion, ConversationRequest
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class ConversationRelay:
    """
    Stateless relay between chat clients and the completion service.

    The credential is fixed at construction time. History is forwarded as
    given unless ``max_history_turns`` is set, in which case only the most
    recent turns are kept.
    """

    system_prompt = SYSTEM_PROMPT

    def __init__(
        self,
        client: CompletionClient,
        api_key: str | None,
        max_history_turns: int | None = None,
    ) -> None:
        if max_history_turns is not None and max_history_turns < 0:
            raise ValueError(f"max_history_turns must be >= 0, got {max_history_turns}")
        self._client = client
        self._api_key = api_key
        self.max_history_turns = max_history_turns

    def build_transcript(self, message: str, history: Sequence[ChatTurn]) -> list[ChatTurn]:
        """Append the new user message to the (optionally windowed) history."""
        turns = list(history)
        if self.max_history_turns is not None:
            turns = turns[-self.max_history_turns :] if self.max_history_turns else []
        turns.append(ChatTurn(role="user", content=message))
        return turns

    async def relay(self, message: str | None, history: Sequence[ChatTurn] = ()) -> Completion:
        """
        Forward a message to the completion service.

        Args:
            message: The user's new message; must be non-empty after trimming
            history: Prior turns, oldest first

        Returns:
            The model's reply and conversation id

        Raises:
            ValidationError: If ``message`` is blank
            ConfigurationError: If no credential was configured
            UpstreamError: If the completion call failed
        """
        if not message or not message.strip():
            raise ValidationError("message required", field="message")
        if not self._api_key:
            logger.error("Completion credential is not configured")
            raise ConfigurationError("credential not configured")

        transcript = self.build_transcript(message, history)
        try:
            return await self._client.send_completion(
                self._api_key, self.system_prompt, transcript
            )
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(f"Completion client failed: {type(e).__name__}: {e}")
            raise UpstreamError() from e

    async def handle(self, request: ConversationRequest) -> Completion:
        """Relay a parsed ConversationRequest."""
        return await self.relay(request.message, request.history)
