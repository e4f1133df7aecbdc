"""
Local LLM Provider

Chat completions against a local model server that exposes the
OpenAI-compatible /v1/chat/completions endpoint (Ollama, vLLM, llama.cpp).
"""

import logging

import httpx

from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.models import LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)


class LocalProvider(BaseLLMProvider):
    """Local model server over httpx."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 60,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(
            provider_name="local",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=float(timeout))

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/v1/chat/completions"

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        POST once to the completions endpoint.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses
        """
        request = self._prepare(request)
        body = {
            "model": request.model,
            "messages": request.wire_messages(),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": False,
            **request.options,
        }

        try:
            response = await self.client.post(self.completions_url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Local model server at {self.base_url} failed: {e}")
            raise

        data = response.json()
        choice = (data.get("choices") or [{}])[0]
        return self._received(
            LLMResponse(
                content=(choice.get("message") or {}).get("content") or "",
                model=data.get("model") or request.model,
                provider=self.provider_name,
                usage=LLMUsage.parse(data.get("usage")),
                finish_reason=self._map_finish_reason(choice.get("finish_reason")),
                metadata={"base_url": self.base_url},
            )
        )

    async def close(self) -> None:
        await self.client.aclose()
