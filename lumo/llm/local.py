"""
Local LLM Provider

Implementation of BaseLLMProvider for local models.
Supports Ollama (including llava-style vision models) and any
OpenAI-compatible endpoint such as vLLM or llama.cpp server.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

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


class LocalProvider(BaseLLMProvider):
    """
    Local LLM provider implementation.

    Tries Ollama's /api/chat first, then falls back to the
    OpenAI-compatible /v1/chat/completions endpoint.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: int = 60,
    ):
        """
        Initialize local provider.

        Args:
            base_url: Base URL for local model server
            model: Model name (e.g., "llama3.1:8b" for Ollama)
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout
        """
        super().__init__(
            provider_name="local",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.base_url = base_url.rstrip("/")
        self.model = model
        self.client = httpx.AsyncClient(timeout=float(timeout))

        logger.info(
            f"Local provider initialized: {base_url} with model: {model}",
            extra={"base_url": base_url, "model": model},
        )

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using local model server."""
        request = self._apply_defaults(request)
        self._log_request(request)

        try:
            response = await self._call_ollama(self._ollama_payload(request, stream=False))
        except httpx.HTTPError as e:
            logger.debug(f"Ollama endpoint unavailable, trying OpenAI-compatible API: {e}")
            response = await self._call_openai_compatible(self._openai_payload(request, stream=False))

        choices = response.get("choices") or [{}]
        usage = response.get("usage", {})
        prompt_tokens = response.get("prompt_eval_count", 0) or usage.get("prompt_tokens", 0)
        completion_tokens = response.get("eval_count", 0) or usage.get("completion_tokens", 0)

        llm_response = LLMResponse(
            content=response.get("message", {}).get("content", "")
            or choices[0].get("message", {}).get("content", ""),
            model=response.get("model", self.model),
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            finish_reason="stop",
            provider="local",
            metadata={"base_url": self.base_url},
        )

        self._log_response(llm_response)
        return llm_response

    async def stream(self, request: LLMRequest) -> AsyncIterator[LLMStreamChunk]:
        """Stream completion using local model server."""
        request = self._apply_defaults(request)
        self._log_request(request)

        try:
            async with self.client.stream(
                "POST",
                f"{self.base_url}/api/chat",
                json=self._ollama_payload(request, stream=True),
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if line.strip():
                        chunk_data = json.loads(line)
                        if content := chunk_data.get("message", {}).get("content"):
                            yield LLMStreamChunk(content=content, finish_reason=None)
            return
        except httpx.HTTPError as e:
            logger.debug(f"Ollama streaming unavailable, trying OpenAI-compatible API: {e}")

        async with self.client.stream(
            "POST",
            f"{self.base_url}/v1/chat/completions",
            json=self._openai_payload(request, stream=True),
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if line.startswith("data: ") and not line.endswith("[DONE]"):
                    chunk_data = json.loads(line[6:])
                    if (
                        content := (chunk_data.get("choices") or [{}])[0]
                        .get("delta", {})
                        .get("content")
                    ):
                        yield LLMStreamChunk(content=content, finish_reason=None)

    def count_tokens(self, text: str) -> int:
        """Count tokens (rough approximation for local models)."""
        return len(text) // 4

    def get_model_info(self, model_name: str | None = None) -> ModelInfo:
        """Get local model information."""
        model = model_name or self.model

        return ModelInfo(
            name=model,
            provider="local",
            context_window=4096,
            max_output=2048,
            capabilities=["vision"] if "llava" in model else [],
        )

    def _ollama_payload(self, request: LLMRequest, stream: bool) -> dict[str, Any]:
        messages = []
        for msg in request.messages:
            item: dict[str, Any] = {"role": msg.role, "content": msg.content}
            if msg.images:
                item["images"] = [image.data for image in msg.images]
            messages.append(item)
        return {
            "model": request.model or self.model,
            "messages": messages,
            "stream": stream,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }

    def _openai_payload(self, request: LLMRequest, stream: bool) -> dict[str, Any]:
        return {
            "model": request.model or self.model,
            "messages": [self._openai_message(msg) for msg in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": stream,
        }

    @staticmethod
    def _openai_message(msg: LLMMessage) -> dict[str, Any]:
        if not msg.images:
            return {"role": msg.role, "content": msg.content}
        parts: list[dict[str, Any]] = [{"type": "text", "text": msg.content}]
        parts.extend(
            {"type": "image_url", "image_url": {"url": image.data_url}} for image in msg.images
        )
        return {"role": msg.role, "content": parts}

    async def _call_ollama(self, payload: dict) -> dict:
        """Call Ollama-specific endpoint."""
        response = await self.client.post(
            f"{self.base_url}/api/chat",
            json=payload,
        )
        response.raise_for_status()
        return response.json()

    async def _call_openai_compatible(self, payload: dict) -> dict:
        """Call OpenAI-compatible endpoint."""
        response = await self.client.post(
            f"{self.base_url}/v1/chat/completions",
            json=payload,
        )
        response.raise_for_status()
        return response.json()
