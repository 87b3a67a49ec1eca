"""
OpenAI LLM Provider

Implementation of BaseLLMProvider for OpenAI's GPT models.
Supports GPT-4o, GPT-4o-mini and image inputs via data URLs.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

import openai
import tiktoken
from openai import AsyncOpenAI

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


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI LLM provider implementation.

    Uses the official openai Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: int = 60,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
        """
        super().__init__(
            provider_name="openai",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.model = model
        self.client = AsyncOpenAI(
            api_key=api_key,
            timeout=float(timeout),
        )

        logger.info(f"OpenAI provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate completion using OpenAI API.

        Raises:
            openai.APIError: On API errors
            openai.APITimeoutError: On timeout
        """
        request = self._apply_defaults(request)
        self._log_request(request)

        try:
            response = await self.client.chat.completions.create(
                model=request.model or self.model,
                messages=[self._convert_message(msg) for msg in request.messages],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                **request.metadata,
            )

            llm_response = LLMResponse(
                content=response.choices[0].message.content or "",
                model=response.model,
                usage=LLMUsage(
                    prompt_tokens=response.usage.prompt_tokens,
                    completion_tokens=response.usage.completion_tokens,
                    total_tokens=response.usage.total_tokens,
                ),
                finish_reason=self._map_finish_reason(response.choices[0].finish_reason),
                provider="openai",
                metadata={
                    "id": response.id,
                    "created": response.created,
                },
            )

            self._log_response(llm_response)
            return llm_response

        except openai.APITimeoutError as e:
            logger.error(f"OpenAI API timeout: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise

    async def stream(self, request: LLMRequest) -> AsyncIterator[LLMStreamChunk]:
        """Stream completion using OpenAI API."""
        request = self._apply_defaults(request)
        request.stream = True
        self._log_request(request)

        try:
            stream = await self.client.chat.completions.create(
                model=request.model or self.model,
                messages=[self._convert_message(msg) for msg in request.messages],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                stream=True,
                **request.metadata,
            )

            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                if choice.delta.content:
                    yield LLMStreamChunk(
                        content=choice.delta.content,
                        finish_reason=self._map_finish_reason(choice.finish_reason)
                        if choice.finish_reason
                        else None,
                        metadata={"id": chunk.id},
                    )

        except openai.APIError as e:
            logger.error(f"OpenAI streaming error: {e}")
            raise

    def count_tokens(self, text: str) -> int:
        """Count tokens using tiktoken."""
        try:
            try:
                encoding = tiktoken.encoding_for_model(self.model)
            except KeyError:
                encoding = tiktoken.get_encoding("cl100k_base")
            return len(encoding.encode(text))
        except Exception:
            # tiktoken downloads encodings lazily; offline hosts get the estimate
            return len(text) // 4

    def get_model_info(self, model_name: str | None = None) -> ModelInfo:
        """Get OpenAI model information."""
        model = model_name or self.model

        model_info_map = {
            "gpt-4o": ModelInfo(
                name="gpt-4o",
                provider="openai",
                context_window=128000,
                max_output=16384,
                capabilities=["vision", "json-mode"],
            ),
            "gpt-4o-mini": ModelInfo(
                name="gpt-4o-mini",
                provider="openai",
                context_window=128000,
                max_output=16384,
                capabilities=["vision", "json-mode"],
            ),
        }

        return model_info_map.get(
            model,
            ModelInfo(
                name=model,
                provider="openai",
                context_window=128000,
                max_output=4096,
                capabilities=[],
            ),
        )

    @staticmethod
    def _convert_message(msg: LLMMessage) -> dict[str, Any]:
        """Convert a message to OpenAI format, using content parts for images."""
        if not msg.images:
            return {"role": msg.role, "content": msg.content}
        parts: list[dict[str, Any]] = [{"type": "text", "text": msg.content}]
        for image in msg.images:
            parts.append({"type": "image_url", "image_url": {"url": image.data_url}})
        return {"role": msg.role, "content": parts}

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map OpenAI finish reason to our standard format."""
        if reason in ("stop", "length", "content_filter"):
            return reason
        return "stop"
