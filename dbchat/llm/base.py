"""
Base LLM Provider

The SQL generator and the chat relay only ever call generate(), so this is
the whole contract a chat-completion backend has to meet.
"""

import logging
from abc import ABC, abstractmethod

from dbchat.llm.models import FinishReason, LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """
    One chat-completion backend.

    Implementations make exactly one outbound call per generate() and never
    retry; a failed call surfaces to the caller unchanged.

    Attributes:
        provider_name: openai, azure or local
        model: Model (or Azure deployment) used when a request names none
        temperature: Sampling temperature used when a request sets none
        max_tokens: Completion length used when a request sets none
        timeout: Per-call timeout in seconds
    """

    def __init__(
        self,
        provider_name: str,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 60,
    ):
        self.provider_name = provider_name
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        logger.info(
            f"Using {provider_name} chat completions with {model}",
            extra={"provider": provider_name, "model": model, "timeout": timeout},
        )

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Send request.messages and return the first candidate.

        Raises:
            Exception: Whatever the underlying client raises (HTTP, auth, timeout)
        """
        pass  # pragma: no cover - abstract method

    async def close(self) -> None:
        """Release the underlying HTTP client, if any."""
        return None

    def _prepare(self, request: LLMRequest) -> LLMRequest:
        prepared = request.with_defaults(self.model, self.temperature, self.max_tokens)
        logger.debug(
            f"Sending {len(prepared.messages)} messages to {self.provider_name}",
            extra={
                "provider": self.provider_name,
                "model": prepared.model,
                "temperature": prepared.temperature,
                "max_tokens": prepared.max_tokens,
            },
        )
        return prepared

    def _received(self, response: LLMResponse) -> LLMResponse:
        logger.debug(
            f"{self.provider_name} answered ({response.usage.total_tokens} tokens, "
            f"finish_reason={response.finish_reason})",
            extra={"provider": self.provider_name, "model": response.model},
        )
        return response

    @staticmethod
    def _map_finish_reason(reason: str | None) -> FinishReason:
        """Collapse endpoint-specific finish reasons onto ours."""
        if reason in ("stop", "length", "content_filter"):
            return reason
        return "stop"
