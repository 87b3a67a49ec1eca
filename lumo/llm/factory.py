"""
LLM Provider Factory

Factory and registry for creating LLM provider instances based on configuration.
Supports OpenAI, Anthropic, Google, and Local providers for both chat and
image analysis.
"""

import logging
from typing import Literal

from lumo.config import LLMSettings
from lumo.llm.anthropic import AnthropicProvider
from lumo.llm.base import BaseLLMProvider
from lumo.llm.google import GoogleProvider
from lumo.llm.local import LocalProvider
from lumo.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)

ModelType = Literal["main", "vision"]


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    "main" providers answer chat messages; "vision" providers use the
    vision model and the lower analysis temperature.
    """

    PROVIDERS = {
        "openai": OpenAIProvider,
        "anthropic": AnthropicProvider,
        "google": GoogleProvider,
        "local": LocalProvider,
    }

    @staticmethod
    def create_provider(
        provider_type: Literal["openai", "anthropic", "google", "local"],
        config: LLMSettings,
        model_type: ModelType = "main",
    ) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Type of provider to create
            config: LLM configuration settings
            model_type: Chat ("main") or image analysis ("vision") model

        Returns:
            Configured provider instance

        Raises:
            ValueError: If provider type is unknown or its API key is missing
        """
        if provider_type not in LLMProviderFactory.PROVIDERS:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {list(LLMProviderFactory.PROVIDERS.keys())}"
            )

        logger.info(
            f"Creating {provider_type} provider with {model_type} model",
            extra={"provider": provider_type, "model_type": model_type},
        )

        if model_type == "vision":
            temperature, max_tokens = config.vision_temperature, config.vision_max_tokens
        else:
            temperature, max_tokens = config.temperature, config.max_tokens

        if provider_type == "openai":
            if not config.openai_api_key:
                raise ValueError("OpenAI API key is required but not configured")
            return OpenAIProvider(
                api_key=config.openai_api_key,
                model=config.openai_vision_model if model_type == "vision" else config.openai_model,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=config.timeout,
            )
        if provider_type == "anthropic":
            if not config.anthropic_api_key:
                raise ValueError("Anthropic API key is required but not configured")
            return AnthropicProvider(
                api_key=config.anthropic_api_key,
                model=config.anthropic_vision_model
                if model_type == "vision"
                else config.anthropic_model,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=config.timeout,
            )
        if provider_type == "google":
            if not config.google_api_key:
                raise ValueError("Google API key is required but not configured")
            return GoogleProvider(
                api_key=config.google_api_key,
                model=config.google_vision_model if model_type == "vision" else config.google_model,
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=config.timeout,
            )
        return LocalProvider(
            base_url=config.local_base_url,
            model=config.local_vision_model if model_type == "vision" else config.local_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=config.timeout,
        )

    @staticmethod
    def create_default_provider(config: LLMSettings) -> BaseLLMProvider:
        """Create the chat provider using default_provider from config."""
        return LLMProviderFactory.create_provider(config.default_provider, config, "main")

    @staticmethod
    def create_vision_provider(config: LLMSettings) -> BaseLLMProvider:
        """
        Create the image analysis provider.

        Uses vision_provider when set and falls back to default_provider.
        """
        provider_type = config.vision_provider or config.default_provider
        logger.info(
            "Creating vision provider",
            extra={
                "provider": provider_type,
                "has_override": config.vision_provider is not None,
            },
        )
        return LLMProviderFactory.create_provider(provider_type, config, "vision")
