"""
Anthropic LLM Provider

Implementation of BaseLLMProvider for Anthropic's Claude models.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from lumo.llm.base import BaseLLMProvider
from lumo.llm.models import (
    LLMMessage,
    LLMRequest,
    LLMResponse,
    LLMStreamChunk,
    LLMUsage,
    ModelInfo,
)

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic (Claude) LLM provider implementation.

    The system prompt travels outside the message list, and images are sent
    as base64 content blocks ahead of the text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-haiku-20241022",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: int = 60,
    ):
        super().__init__(
            provider_name="anthropic",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.model = model
        self.client = AsyncAnthropic(api_key=api_key, timeout=float(timeout))

        logger.info(f"Anthropic provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Anthropic API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        system_message, messages = self._split_messages(request.messages)

        try:
            response = await self.client.messages.create(
                model=request.model or self.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=system_message or anthropic.NOT_GIVEN,
                messages=messages,
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        llm_response = LLMResponse(
            content=text,
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
            finish_reason=self._map_finish_reason(response.stop_reason),
            provider="anthropic",
            metadata={"id": response.id},
        )

        self._log_response(llm_response)
        return llm_response

    async def stream(self, request: LLMRequest) -> AsyncIterator[LLMStreamChunk]:
        """Stream completion using Anthropic API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        system_message, messages = self._split_messages(request.messages)

        try:
            async with self.client.messages.stream(
                model=request.model or self.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=system_message or anthropic.NOT_GIVEN,
                messages=messages,
            ) as stream:
                async for chunk in stream.text_stream:
                    yield LLMStreamChunk(content=chunk, finish_reason=None)
        except anthropic.APIError as e:
            logger.error(f"Anthropic streaming error: {e}")
            raise

    def count_tokens(self, text: str) -> int:
        """Rough approximation (~4 characters per token)."""
        return len(text) // 4

    def get_model_info(self, model_name: str | None = None) -> ModelInfo:
        """Get Anthropic model information."""
        model = model_name or self.model

        model_info_map = {
            "claude-3-5-sonnet-20241022": ModelInfo(
                name="claude-3-5-sonnet-20241022",
                provider="anthropic",
                context_window=200000,
                max_output=8192,
                capabilities=["vision"],
            ),
            "claude-3-5-haiku-20241022": ModelInfo(
                name="claude-3-5-haiku-20241022",
                provider="anthropic",
                context_window=200000,
                max_output=8192,
                capabilities=[],
            ),
        }

        return model_info_map.get(
            model,
            ModelInfo(
                name=model,
                provider="anthropic",
                context_window=200000,
                max_output=8192,
                capabilities=[],
            ),
        )

    @staticmethod
    def _split_messages(messages: list[LLMMessage]) -> tuple[str | None, list[dict[str, Any]]]:
        """Separate system prompts from the conversation turns."""
        system_parts: list[str] = []
        converted: list[dict[str, Any]] = []
        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
                continue
            if msg.images:
                content: Any = [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": image.mime_type,
                            "data": image.data,
                        },
                    }
                    for image in msg.images
                ]
                content.append({"type": "text", "text": msg.content})
            else:
                content = msg.content
            converted.append({"role": msg.role, "content": content})
        system = "\n\n".join(system_parts) if system_parts else None
        return system, converted

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map Anthropic stop reason to standard format."""
        if reason == "max_tokens":
            return "length"
        return "stop"
