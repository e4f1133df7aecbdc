"""
LLM Provider Module

Chat-completion abstraction over OpenAI, Azure OpenAI and local model servers.

Usage:
    from dbchat.llm import LLMProviderFactory, LLMRequest, LLMMessage
    from dbchat.config import get_settings

    provider = LLMProviderFactory.create_provider(get_settings().llm)

    request = LLMRequest(
        messages=[LLMMessage(role="user", content="Hello!")],
    )

    response = await provider.generate(request)
    print(response.content)
"""

from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.factory import LLMProviderFactory
from dbchat.llm.local import LocalProvider
from dbchat.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from dbchat.llm.openai import AzureOpenAIProvider, OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "LLMProviderFactory",
    "OpenAIProvider",
    "AzureOpenAIProvider",
    "LocalProvider",
]
