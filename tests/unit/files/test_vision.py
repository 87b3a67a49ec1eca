"""Tests for ImageAnalyzer."""

import pytest

from lumo.files.vision import (
    EMPTY_DESCRIPTION,
    ImageAnalysisError,
    ImageAnalyzer,
    classify_vision_error,
)


@pytest.mark.asyncio
async def test_analyze_sends_prompt_with_image(mock_llm_provider):
    mock_llm_provider.set_response("  A sunset over the sea.  ")
    analyzer = ImageAnalyzer(mock_llm_provider)

    description = await analyzer.analyze("aGVsbG8=", "image/jpeg")

    assert description == "A sunset over the sea."
    request = mock_llm_provider.generate.call_args.args[0]
    message = request.messages[0]
    assert message.role == "user"
    assert message.content.startswith("Please analyze this image")
    assert message.images[0].data == "aGVsbG8="
    assert message.images[0].mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_empty_reply_uses_placeholder(mock_llm_provider):
    mock_llm_provider.set_response("   ")

    description = await ImageAnalyzer(mock_llm_provider).analyze("aGk=")

    assert description == EMPTY_DESCRIPTION


@pytest.mark.asyncio
async def test_provider_failure_raises_analysis_error(mock_llm_provider):
    mock_llm_provider.generate.side_effect = RuntimeError("429 quota exceeded")

    with pytest.raises(ImageAnalysisError) as exc_info:
        await ImageAnalyzer(mock_llm_provider).analyze("aGk=")

    assert exc_info.value.message == "Image analysis temporarily unavailable due to high usage"
    assert exc_info.value.detail == "429 quota exceeded"


@pytest.mark.parametrize(
    "error_text,expected",
    [
        ("Rate limit reached", "Image analysis temporarily unavailable due to high usage"),
        ("Gemini response blocked: SAFETY", "Image content cannot be analyzed due to safety restrictions"),
        ("connection reset", "Failed to analyze image"),
    ],
)
def test_classify_vision_error(error_text, expected):
    assert classify_vision_error(RuntimeError(error_text)).message == expected
