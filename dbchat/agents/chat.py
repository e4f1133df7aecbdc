"""
Chat Relay

Forwards an existing conversation to the chat-completion backend for
general follow-up questions. No schema, no output contract, no parsing.
"""

import logging
from collections.abc import Sequence

from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.models import LLMMessage, LLMRequest
from dbchat.models.errors import LLMError

logger = logging.getLogger(__name__)


class ChatRelay:
    """Pass-through to the chat backend."""

    def __init__(self, provider: BaseLLMProvider):
        self.provider = provider

    async def relay(self, history: Sequence[LLMMessage]) -> LLMMessage:
        """
        Send the full history as-is and return the assistant's reply.

        Raises:
            pydantic.ValidationError: If history is empty
            LLMError: If the call fails or returns no text
        """
        request = LLMRequest(messages=list(history))

        try:
            response = await self.provider.generate(request)
        except Exception as e:
            logger.error(f"Chat relay call failed: {e}")
            raise LLMError(
                f"Chat completion failed: {e}",
                context={"provider": self.provider.provider_name},
            ) from e

        if not response.content:
            raise LLMError(
                "Chat completion returned no text content",
                context={"finish_reason": response.finish_reason},
            )

        logger.debug(
            "Chat relay completed",
            extra={"message_count": len(request.messages), "model": response.model},
        )
        return LLMMessage(role="assistant", content=response.content)
