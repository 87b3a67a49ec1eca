"""
Google LLM Provider

Implementation of BaseLLMProvider for Google's Gemini models.
Supports Gemini 1.5 Flash, Gemini 1.5 Pro and inline image parts.
"""

import base64
import logging
import warnings
from collections.abc import AsyncIterator
from typing import Any

with warnings.catch_warnings():
    warnings.simplefilter("ignore", FutureWarning)
    import google.generativeai as genai

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


class GoogleProvider(BaseLLMProvider):
    """
    Google (Gemini) LLM provider implementation.

    System messages become the model's system instruction; the remaining
    turns are sent as chat contents with "user" and "model" roles.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: int = 60,
        top_p: float | None = 0.8,
        top_k: int | None = 40,
    ):
        """Initialize Google provider."""
        super().__init__(
            provider_name="google",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.model = model
        self.api_key = api_key
        self.top_p = top_p
        self.top_k = top_k

        genai.configure(api_key=api_key)
        self.genai = genai

        logger.info(f"Google provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Google Gemini API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        model_name = request.model or self.model
        system_instruction, contents = self._convert_messages(request.messages)
        client = self._client(model_name, system_instruction)

        response = await client.generate_content_async(
            contents,
            generation_config=self._generation_config(request),
        )
        finish_reason = self._extract_finish_reason(response)
        response_text = self._extract_response_text(response)
        if not response_text and finish_reason == "content_filter":
            raise ValueError(
                f"Gemini response blocked: {self._extract_raw_finish_reason(response)}"
            )

        # Gemini doesn't always report usage, so estimate from text
        prompt_tokens = self.count_tokens(
            "\n\n".join(msg.content for msg in request.messages)
        )
        completion_tokens = self.count_tokens(response_text)

        llm_response = LLMResponse(
            content=response_text,
            model=model_name,
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason=finish_reason,
            provider="google",
            metadata={"raw_finish_reason": self._extract_raw_finish_reason(response)},
        )

        self._log_response(llm_response)
        return llm_response

    async def stream(self, request: LLMRequest) -> AsyncIterator[LLMStreamChunk]:
        """Stream completion using Google Gemini API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        model_name = request.model or self.model
        system_instruction, contents = self._convert_messages(request.messages)
        client = self._client(model_name, system_instruction)

        response = await client.generate_content_async(
            contents,
            generation_config=self._generation_config(request),
            stream=True,
        )

        async for chunk in response:
            text = self._extract_response_text(chunk)
            if text:
                yield LLMStreamChunk(content=text, finish_reason=None)

    def count_tokens(self, text: str) -> int:
        """Count tokens for Google models."""
        # Rough approximation
        return len(text) // 4

    def _client(self, model_name: str, system_instruction: str | None) -> Any:
        if system_instruction:
            return self.genai.GenerativeModel(model_name, system_instruction=system_instruction)
        return self.genai.GenerativeModel(model_name)

    def _generation_config(self, request: LLMRequest) -> Any:
        options: dict[str, Any] = {
            "temperature": request.temperature,
            "max_output_tokens": request.max_tokens,
        }
        if self.top_p is not None:
            options["top_p"] = self.top_p
        if self.top_k is not None:
            options["top_k"] = self.top_k
        return self.genai.types.GenerationConfig(**options)

    @staticmethod
    def _convert_messages(messages: list[LLMMessage]) -> tuple[str | None, list[dict[str, Any]]]:
        """Convert messages to Gemini contents (assistant -> model)."""
        system_parts: list[str] = []
        contents: list[dict[str, Any]] = []
        for msg in messages:
            if msg.role == "system":
                system_parts.append(msg.content)
                continue
            parts: list[Any] = [
                {"mime_type": image.mime_type, "data": base64.b64decode(image.data)}
                for image in msg.images
            ]
            parts.append(msg.content)
            contents.append(
                {"role": "model" if msg.role == "assistant" else "user", "parts": parts}
            )
        system = "\n\n".join(system_parts) if system_parts else None
        return system, contents

    def _extract_response_text(self, response: Any) -> str:
        try:
            text = response.text
        except (AttributeError, ValueError):
            # .text raises ValueError when the candidate has no parts (blocked)
            return ""
        if isinstance(text, str):
            return text
        if text is None:
            return ""
        return str(text)

    def _extract_raw_finish_reason(self, response: Any) -> str:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            feedback = getattr(response, "prompt_feedback", None)
            return str(getattr(feedback, "block_reason", "") or "")
        first = candidates[0] if len(candidates) > 0 else None
        if first is None:
            return ""
        reason = getattr(first, "finish_reason", "")
        return str(getattr(reason, "name", reason) or "")

    def _extract_finish_reason(self, response: Any) -> str:
        raw_reason = self._extract_raw_finish_reason(response).lower()
        if any(token in raw_reason for token in ("max_tokens", "length")):
            return "length"
        if any(token in raw_reason for token in ("safety", "blocked", "recitation")):
            return "content_filter"
        if "error" in raw_reason:
            return "error"
        return "stop"

    def get_model_info(self, model_name: str | None = None) -> ModelInfo:
        """Get Google model information."""
        model = model_name or self.model

        model_info_map = {
            "gemini-1.5-pro": ModelInfo(
                name="gemini-1.5-pro",
                provider="google",
                context_window=2097152,
                max_output=8192,
                capabilities=["vision", "function-calling"],
            ),
            "gemini-1.5-flash": ModelInfo(
                name="gemini-1.5-flash",
                provider="google",
                context_window=1048576,
                max_output=8192,
                capabilities=["vision", "function-calling"],
            ),
        }

        return model_info_map.get(
            model,
            ModelInfo(
                name=model,
                provider="google",
                context_window=1048576,
                max_output=8192,
                capabilities=[],
            ),
        )
