"""Image description through a vision-capable LLM provider."""

import logging

from lumo.llm import BaseLLMProvider, LLMImage, LLMMessage, LLMRequest
from lumo.prompts import PromptLoader

logger = logging.getLogger(__name__)

IMAGE_ANALYSIS_PROMPT = "vision/image_analysis.md"
EMPTY_DESCRIPTION = "Unable to analyze image content."


class ImageAnalysisError(Exception):
    """Vision call failed; message is safe to show to the user."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


def classify_vision_error(error: Exception) -> ImageAnalysisError:
    """Map a provider failure to the user-facing analysis error."""
    text = str(error)
    lowered = text.lower()
    if "429" in text or "quota" in lowered or "rate limit" in lowered:
        message = "Image analysis temporarily unavailable due to high usage"
    elif "SAFETY" in text.upper():
        message = "Image content cannot be analyzed due to safety restrictions"
    else:
        message = "Failed to analyze image"
    return ImageAnalysisError(message, detail=text)


class ImageAnalyzer:
    """Describe uploaded images with the vision model."""

    def __init__(self, provider: BaseLLMProvider, prompts: PromptLoader | None = None) -> None:
        self.provider = provider
        self.prompts = prompts or PromptLoader()

    async def analyze(self, image_base64: str, mime_type: str = "image/png") -> str:
        """
        Return a natural-language description of an image.

        Raises:
            ImageAnalysisError: If the provider call fails
        """
        request = LLMRequest(
            messages=[
                LLMMessage(
                    role="user",
                    content=self.prompts.load(IMAGE_ANALYSIS_PROMPT),
                    images=[LLMImage(data=image_base64, mime_type=mime_type)],
                )
            ]
        )
        try:
            response = await self.provider.generate(request)
        except Exception as e:
            logger.error(f"Image analysis failed: {e}", extra={"mime_type": mime_type})
            raise classify_vision_error(e) from e

        description = response.content.strip()
        logger.info(
            "Image analyzed",
            extra={"mime_type": mime_type, "description_chars": len(description)},
        )
        return description or EMPTY_DESCRIPTION
