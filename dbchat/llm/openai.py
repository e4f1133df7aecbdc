"""
OpenAI LLM Provider

Chat completions through the official openai SDK, against either
api.openai.com or an Azure OpenAI deployment. Both clients are built with
max_retries=0 so one generate() is one HTTP call.
"""

import logging

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI

from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.models import LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """Chat completions on api.openai.com."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 60,
    ):
        super().__init__(
            provider_name="openai",
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        self.client = AsyncOpenAI(api_key=api_key, timeout=float(timeout), max_retries=0)

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Run one chat completion and keep the first choice.

        Raises:
            openai.APITimeoutError: If the call exceeded the timeout
            openai.APIError: On any other API failure
        """
        request = self._prepare(request)

        try:
            completion = await self.client.chat.completions.create(
                model=request.model,
                messages=request.wire_messages(),
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                **request.options,
            )
        except openai.APITimeoutError as e:
            logger.error(f"{self.provider_name} chat completion timed out after {self.timeout}s: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"{self.provider_name} chat completion failed: {e}")
            raise

        choice = completion.choices[0]
        return self._received(
            LLMResponse(
                content=choice.message.content or "",
                model=completion.model,
                provider=self.provider_name,
                usage=LLMUsage.parse(completion.usage),
                finish_reason=self._map_finish_reason(choice.finish_reason),
                metadata={
                    "id": completion.id,
                    "created": completion.created,
                    "system_fingerprint": completion.system_fingerprint,
                },
            )
        )

    async def close(self) -> None:
        await self.client.close()


class AzureOpenAIProvider(OpenAIProvider):
    """
    Chat completions on an Azure OpenAI resource.

    The model name sent with each request is the deployment name.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str = "gpt-4o",
        api_version: str = "2024-06-01",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 60,
    ):
        BaseLLMProvider.__init__(
            self,
            provider_name="azure",
            model=deployment,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        self.endpoint = endpoint
        self.client = AsyncAzureOpenAI(
            azure_endpoint=endpoint,
            api_key=api_key,
            api_version=api_version,
            timeout=float(timeout),
            max_retries=0,
        )
