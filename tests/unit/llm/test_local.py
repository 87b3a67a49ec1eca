"""Tests for LocalProvider with a mocked HTTP client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from lumo.llm.local import LocalProvider
from lumo.llm.models import LLMImage, LLMMessage, LLMRequest


@pytest.fixture
def provider():
    return LocalProvider(base_url="http://localhost:11434/", model="llava:7b")


def _http_response(payload):
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json.return_value = payload
    return response


@pytest.mark.asyncio
async def test_generate_uses_ollama_endpoint(provider):
    payload = {
        "model": "llava:7b",
        "message": {"role": "assistant", "content": "Hello from Ollama"},
        "prompt_eval_count": 8,
        "eval_count": 3,
    }
    with patch.object(
        provider.client, "post", new_callable=AsyncMock, return_value=_http_response(payload)
    ) as mock_post:
        response = await provider.generate(
            LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
        )

    assert response.content == "Hello from Ollama"
    assert response.usage.total_tokens == 11
    assert response.provider == "local"
    assert mock_post.call_args.args[0] == "http://localhost:11434/api/chat"


@pytest.mark.asyncio
async def test_generate_falls_back_to_openai_compatible_api(provider):
    openai_payload = {
        "model": "llava:7b",
        "choices": [{"message": {"content": "Hello from vLLM"}}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2},
    }
    with patch.object(
        provider.client,
        "post",
        new_callable=AsyncMock,
        side_effect=[httpx.ConnectError("refused"), _http_response(openai_payload)],
    ) as mock_post:
        response = await provider.generate(
            LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
        )

    assert response.content == "Hello from vLLM"
    assert response.usage.prompt_tokens == 5
    assert mock_post.call_args.args[0] == "http://localhost:11434/v1/chat/completions"


def test_ollama_payload_attaches_images(provider):
    request = LLMRequest(
        messages=[
            LLMMessage(role="user", content="What is it?", images=[LLMImage(data="aGk=")])
        ],
        temperature=0.4,
        max_tokens=100,
    )

    payload = provider._ollama_payload(request, stream=False)

    assert payload["messages"][0]["images"] == ["aGk="]
    assert payload["options"] == {"temperature": 0.4, "num_predict": 100}


def test_model_info_reports_vision_for_llava(provider):
    assert provider.get_model_info().capabilities == ["vision"]
    assert provider.get_model_info("llama3.1:8b").capabilities == []
