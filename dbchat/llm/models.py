"""
Chat-Completion Models

Provider-neutral request/response types. The SQL generator sends a
two-message conversation (system + user); the chat relay sends whatever
history the caller has accumulated.
"""

from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ChatRole = Literal["system", "user", "assistant"]
FinishReason = Literal["stop", "length", "content_filter"]


class LLMMessage(BaseModel):
    """One turn of a conversation."""

    role: ChatRole = Field(..., description="system, user or assistant")
    content: str = Field(..., min_length=1, description="Turn text")

    def as_dict(self) -> dict[str, str]:
        """Wire form used by OpenAI-compatible endpoints."""
        return {"role": self.role, "content": self.content}


class LLMRequest(BaseModel):
    """
    Messages plus optional per-request overrides.

    Unset overrides fall back to the provider's configured defaults
    (see with_defaults).
    """

    messages: list[LLMMessage] = Field(..., min_length=1, description="Conversation, oldest first")
    model: Optional[str] = Field(None, description="Model or deployment override")
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0, description="Sampling temperature override")
    max_tokens: Optional[int] = Field(None, gt=0, description="Completion length override")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra body parameters passed through to the endpoint",
    )

    def with_defaults(self, model: str, temperature: float, max_tokens: int) -> "LLMRequest":
        """Return a copy with every unset override filled in."""
        return self.model_copy(
            update={
                "model": self.model or model,
                "temperature": temperature if self.temperature is None else self.temperature,
                "max_tokens": self.max_tokens or max_tokens,
            }
        )

    def wire_messages(self) -> list[dict[str, str]]:
        return [message.as_dict() for message in self.messages]


class LLMUsage(BaseModel):
    """Token accounting for one call."""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @classmethod
    def parse(cls, usage: Any) -> "LLMUsage":
        """Read a usage block from an SDK object, a JSON mapping, or None."""
        if usage is None:
            return cls()

        def read(key: str) -> int:
            if isinstance(usage, Mapping):
                value = usage.get(key)
            else:
                value = getattr(usage, key, None)
            return value or 0

        return cls(
            prompt_tokens=read("prompt_tokens"),
            completion_tokens=read("completion_tokens"),
            total_tokens=read("total_tokens"),
        )


class LLMResponse(BaseModel):
    """First candidate of a chat completion."""

    content: str = Field(..., description="Assistant text; empty when the endpoint returned none")
    model: str = Field(..., description="Model that actually answered")
    provider: str = Field(..., description="openai, azure or local")
    usage: LLMUsage = Field(default_factory=LLMUsage)
    finish_reason: FinishReason = Field(default="stop")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Response identifiers kept for debugging",
    )
