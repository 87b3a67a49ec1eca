"""
Chat Routes

Stateless chat proxy and one-shot image analysis.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from lumo.chat import ChatServiceError
from lumo.chat.service import NOT_CONFIGURED_MESSAGE
from lumo.files import ImageAnalysisError
from lumo.models.api import (
    AnalyzeImageRequest,
    AnalyzeImageResponse,
    ChatRequest,
    ChatResponse,
)
from lumo.models.chat import Message

logger = logging.getLogger(__name__)

router = APIRouter()


def _split_data_url(image: str, mime_type: str) -> tuple[str, str]:
    """Accept either raw base64 or a data: URL."""
    if image.startswith("data:") and "," in image:
        header, data = image.split(",", 1)
        return data, header[5:].split(";", 1)[0] or mime_type
    return image, mime_type


@router.post("/chat", response_model=ChatResponse)
async def chat(chat_request: ChatRequest) -> ChatResponse | JSONResponse:
    """
    Forward one message with its history, files and persona to the provider.

    Returns:
        ChatResponse with the assistant reply. Provider failures return the
        user-facing message in `response` and the raw cause in `error`, with
        429 for rate limits, 413 for oversized input and 500 otherwise.
    """
    from lumo.api.main import app_state

    if not chat_request.message.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Message is required"},
        )

    chat_service = app_state.get("chat_service")
    if chat_service is None or chat_service.provider is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": NOT_CONFIGURED_MESSAGE},
        )

    logger.info(f"Chat request received: {chat_request.message[:100]}...")
    history = [Message(role=msg.role, content=msg.content) for msg in chat_request.history]
    try:
        reply = await chat_service.reply(
            chat_request.message,
            history=history,
            files=chat_request.file_context,
            persona_id=chat_request.persona_id,
        )
    except ChatServiceError as e:
        return JSONResponse(
            status_code=e.status_code,
            content=ChatResponse(response=e.message, error=e.detail).model_dump(),
        )

    return ChatResponse(response=reply.response)


@router.post("/analyze-image", response_model=AnalyzeImageResponse)
async def analyze_image(request: AnalyzeImageRequest) -> AnalyzeImageResponse | JSONResponse:
    """Describe a base64 image with the vision model."""
    from lumo.api.main import app_state

    if not request.image:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "No image data provided"},
        )

    analyzer = app_state.get("image_analyzer")
    if analyzer is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Vision provider is not configured"},
        )

    data, mime_type = _split_data_url(request.image, request.mime_type)
    try:
        description = await analyzer.analyze(data, mime_type)
    except ImageAnalysisError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": e.message, "success": False},
        )

    return AnalyzeImageResponse(description=description, success=True)
