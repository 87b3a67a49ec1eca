"""Tests for AnthropicProvider with a mocked client."""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import pytest

from lumo.llm.anthropic import AnthropicProvider
from lumo.llm.models import LLMImage, LLMMessage, LLMRequest


@pytest.fixture
def provider():
    return AnthropicProvider(
        api_key="sk-ant-test-key-1234567890",
        model="claude-3-5-haiku-20241022",
        temperature=0.7,
        max_tokens=2048,
        timeout=30,
    )


def _message(text="Hi there", stop_reason="end_turn"):
    block = MagicMock()
    block.type = "text"
    block.text = text
    response = MagicMock()
    response.content = [block]
    response.model = "claude-3-5-haiku-20241022"
    response.usage.input_tokens = 12
    response.usage.output_tokens = 4
    response.stop_reason = stop_reason
    response.id = "msg_1"
    return response


@pytest.mark.asyncio
async def test_generate_passes_system_prompt_separately(provider):
    with patch.object(
        provider.client.messages, "create", new_callable=AsyncMock, return_value=_message()
    ) as mock_create:
        response = await provider.generate(
            LLMRequest(
                messages=[
                    LLMMessage(role="system", content="You are a tutor."),
                    LLMMessage(role="user", content="Hello"),
                ]
            )
        )

    assert response.content == "Hi there"
    assert response.usage.total_tokens == 16
    assert response.provider == "anthropic"
    call_kwargs = mock_create.call_args.kwargs
    assert call_kwargs["system"] == "You are a tutor."
    assert call_kwargs["messages"] == [{"role": "user", "content": "Hello"}]


@pytest.mark.asyncio
async def test_generate_without_system_prompt_omits_it(provider):
    with patch.object(
        provider.client.messages, "create", new_callable=AsyncMock, return_value=_message()
    ) as mock_create:
        await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hello")]))

    assert mock_create.call_args.kwargs["system"] is anthropic.NOT_GIVEN


@pytest.mark.asyncio
async def test_max_tokens_stop_reason_maps_to_length(provider):
    with patch.object(
        provider.client.messages,
        "create",
        new_callable=AsyncMock,
        return_value=_message(stop_reason="max_tokens"),
    ):
        response = await provider.generate(
            LLMRequest(messages=[LLMMessage(role="user", content="Hello")])
        )

    assert response.finish_reason == "length"


def test_split_messages_converts_images_to_base64_blocks():
    system, messages = AnthropicProvider._split_messages(
        [
            LLMMessage(
                role="user",
                content="Describe",
                images=[LLMImage(data="aGVsbG8=", mime_type="image/webp")],
            )
        ]
    )

    assert system is None
    content = messages[0]["content"]
    assert content[0]["source"] == {
        "type": "base64",
        "media_type": "image/webp",
        "data": "aGVsbG8=",
    }
    assert content[1] == {"type": "text", "text": "Describe"}


def test_get_model_info(provider):
    assert "vision" in provider.get_model_info("claude-3-5-sonnet-20241022").capabilities
    assert provider.get_model_info().name == "claude-3-5-haiku-20241022"
