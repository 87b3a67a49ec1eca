"""
Tests for OpenAI Provider.

Tests OpenAI provider implementation with mocked API calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lumo.llm.models import LLMImage, LLMMessage, LLMRequest
from lumo.llm.openai import OpenAIProvider


@pytest.fixture
def provider():
    """Create OpenAI provider instance."""
    return OpenAIProvider(
        api_key="sk-test-key-1234567890abcdefghij",
        model="gpt-4o-mini",
        temperature=0.7,
        max_tokens=2048,
        timeout=30,
    )


def _completion(content="Hello! How can I help?", finish_reason="stop"):
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content
    mock_response.choices[0].finish_reason = finish_reason
    mock_response.model = "gpt-4o-mini"
    mock_response.usage.prompt_tokens = 10
    mock_response.usage.completion_tokens = 5
    mock_response.usage.total_tokens = 15
    mock_response.id = "chatcmpl-123"
    mock_response.created = 1234567890
    return mock_response


class TestOpenAIProviderInit:
    """Test OpenAI provider initialization."""

    def test_initialization(self, provider):
        assert provider.model == "gpt-4o-mini"
        assert provider.temperature == 0.7
        assert provider.max_tokens == 2048
        assert provider.timeout == 30
        assert provider.provider_name == "openai"

    def test_client_created(self, provider):
        assert provider.client is not None


class TestGenerate:
    """Test generate method."""

    @pytest.mark.asyncio
    async def test_successful_generation(self, provider):
        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(),
        ):
            response = await provider.generate(
                LLMRequest(messages=[LLMMessage(role="user", content="Hello!")])
            )

        assert response.content == "Hello! How can I help?"
        assert response.usage.total_tokens == 15
        assert response.finish_reason == "stop"
        assert response.provider == "openai"
        assert response.metadata["id"] == "chatcmpl-123"

    @pytest.mark.asyncio
    async def test_applies_defaults(self, provider):
        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("Test"),
        ) as mock_create:
            await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))

        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 2048
        assert call_kwargs["model"] == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_request_overrides(self, provider):
        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion("Test"),
        ) as mock_create:
            await provider.generate(
                LLMRequest(
                    messages=[LLMMessage(role="user", content="Hi")],
                    temperature=0.4,
                    max_tokens=1024,
                    model="gpt-4o",
                )
            )

        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["temperature"] == 0.4
        assert call_kwargs["max_tokens"] == 1024
        assert call_kwargs["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_empty_content_becomes_empty_string(self, provider):
        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(content=None),
        ):
            response = await provider.generate(
                LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
            )

        assert response.content == ""

    @pytest.mark.asyncio
    async def test_unknown_finish_reason_maps_to_stop(self, provider):
        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_completion(finish_reason="tool_calls"),
        ):
            response = await provider.generate(
                LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
            )

        assert response.finish_reason == "stop"


class TestStream:
    """Test stream method."""

    @pytest.mark.asyncio
    async def test_yields_content_chunks(self, provider):
        def _chunk(text, finish_reason=None):
            chunk = MagicMock()
            chunk.id = "chatcmpl-1"
            chunk.choices = [MagicMock()]
            chunk.choices[0].delta.content = text
            chunk.choices[0].finish_reason = finish_reason
            return chunk

        empty = MagicMock()
        empty.choices = []

        async def _stream():
            for chunk in [_chunk("Hel"), empty, _chunk(None), _chunk("lo", "stop")]:
                yield chunk

        with patch.object(
            provider.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_stream(),
        ) as mock_create:
            chunks = [
                chunk
                async for chunk in provider.stream(
                    LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
                )
            ]

        assert [chunk.content for chunk in chunks] == ["Hel", "lo"]
        assert chunks[-1].finish_reason == "stop"
        assert mock_create.call_args.kwargs["stream"] is True


class TestMessageConversion:
    """Test conversion of messages with images."""

    def test_text_message(self):
        converted = OpenAIProvider._convert_message(LLMMessage(role="user", content="Hi"))
        assert converted == {"role": "user", "content": "Hi"}

    def test_image_message_uses_content_parts(self):
        message = LLMMessage(
            role="user",
            content="Describe this",
            images=[LLMImage(data="aGVsbG8=", mime_type="image/jpeg")],
        )

        converted = OpenAIProvider._convert_message(message)

        assert converted["content"][0] == {"type": "text", "text": "Describe this"}
        assert converted["content"][1]["image_url"]["url"] == "data:image/jpeg;base64,aGVsbG8="


class TestTokensAndModelInfo:
    """Test token counting and model information."""

    def test_count_tokens_returns_positive_number(self, provider):
        assert provider.count_tokens("Hello, world! This is a test.") > 0

    def test_count_tokens_falls_back_to_estimate(self, provider):
        with patch("lumo.llm.openai.tiktoken.encoding_for_model", side_effect=OSError("offline")):
            assert provider.count_tokens("a" * 40) == 10

    def test_known_model_info(self, provider):
        info = provider.get_model_info("gpt-4o")
        assert info.context_window == 128000
        assert "vision" in info.capabilities

    def test_unknown_model_info(self, provider):
        info = provider.get_model_info("gpt-unknown")
        assert info.name == "gpt-unknown"
        assert info.provider == "openai"
        assert info.capabilities == []
