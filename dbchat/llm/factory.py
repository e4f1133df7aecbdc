"""
LLM Provider Factory

Builds the chat-completion provider named by LLM_PROVIDER. The model (or
Azure deployment) always comes from LLMSettings; nothing is hard-coded.
"""

import logging

from dbchat.config import LLMSettings
from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.local import LocalProvider
from dbchat.llm.openai import AzureOpenAIProvider, OpenAIProvider

logger = logging.getLogger(__name__)


def _build_openai(config: LLMSettings) -> OpenAIProvider:
    if not config.openai_api_key:
        raise ValueError("OpenAI API key is required but not configured")
    return OpenAIProvider(
        api_key=config.openai_api_key,
        model=config.openai_model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
    )


def _build_azure(config: LLMSettings) -> AzureOpenAIProvider:
    if not config.azure_endpoint or not config.azure_api_key:
        raise ValueError("Azure OpenAI endpoint and API key are required but not configured")
    return AzureOpenAIProvider(
        endpoint=config.azure_endpoint,
        api_key=config.azure_api_key,
        deployment=config.azure_deployment,
        api_version=config.azure_api_version,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
    )


def _build_local(config: LLMSettings) -> LocalProvider:
    return LocalProvider(
        base_url=config.local_base_url,
        model=config.local_model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
    )


class LLMProviderFactory:
    """Maps provider names to provider classes and their builders."""

    PROVIDERS: dict[str, type[BaseLLMProvider]] = {
        "openai": OpenAIProvider,
        "azure": AzureOpenAIProvider,
        "local": LocalProvider,
    }

    _BUILDERS = {
        "openai": _build_openai,
        "azure": _build_azure,
        "local": _build_local,
    }

    @staticmethod
    def create_provider(config: LLMSettings, provider_type: str | None = None) -> BaseLLMProvider:
        """
        Build a provider from settings.

        Args:
            config: LLM settings
            provider_type: Use this provider instead of config.provider

        Raises:
            ValueError: Unknown provider, or credentials missing for it
        """
        provider_type = provider_type or config.provider
        builder = LLMProviderFactory._BUILDERS.get(provider_type)
        if builder is None:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {sorted(LLMProviderFactory.PROVIDERS)}"
            )

        logger.info(f"Creating {provider_type} provider", extra={"provider": provider_type})
        return builder(config)
