"""
LLM Provider Module

Multi-provider LLM abstraction layer supporting OpenAI, Anthropic, Google, and Local models.

Usage:
    from lumo.llm import LLMProviderFactory, LLMRequest, LLMMessage
    from lumo.config import get_settings

    config = get_settings()
    provider = LLMProviderFactory.create_default_provider(config.llm)

    request = LLMRequest(
        messages=[LLMMessage(role="user", content="Hello!")],
    )

    response = await provider.generate(request)
    print(response.content)
"""

from lumo.llm.anthropic import AnthropicProvider
from lumo.llm.base import BaseLLMProvider
from lumo.llm.factory import LLMProviderFactory
from lumo.llm.google import GoogleProvider
from lumo.llm.local import LocalProvider
from lumo.llm.models import (
    LLMImage,
    LLMMessage,
    LLMRequest,
    LLMResponse,
    LLMStreamChunk,
    LLMUsage,
    ModelInfo,
)
from lumo.llm.openai import OpenAIProvider

__all__ = [
    # Base classes
    "BaseLLMProvider",
    # Models
    "LLMImage",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMStreamChunk",
    "LLMUsage",
    "ModelInfo",
    # Factory
    "LLMProviderFactory",
    # Providers
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "LocalProvider",
]
