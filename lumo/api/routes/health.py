"""
Health Check Routes

FastAPI endpoints for service health and readiness checks.
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from lumo import __version__
from lumo.models.api import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    Returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness() -> JSONResponse:
    """
    Readiness check for service dependencies.

    Checks:
    - Chat provider is configured
    - Session and conversation stores are initialized

    Image analysis and voice are optional and reported without failing
    readiness. Image analysis counts only when the vision model accepts
    images. The configured model names are listed under ``models``.

    Returns:
        200 OK if all required checks pass
        503 Service Unavailable if any required check fails
    """
    from lumo.api.main import app_state

    chat_service = app_state.get("chat_service")
    voice_service = app_state.get("voice_service")
    checks = {
        "chat_provider": chat_service is not None and chat_service.provider is not None,
        "session_store": app_state.get("session_store") is not None,
        "conversation_store": app_state.get("conversation_store") is not None,
    }
    all_ready = all(checks.values())
    for name, ok in checks.items():
        if not ok:
            logger.warning(f"Readiness check failed: {name}")

    models: dict[str, str] = {}
    if checks["chat_provider"]:
        models["chat"] = chat_service.provider.get_model_info().name

    analyzer = app_state.get("image_analyzer")
    checks["image_analysis"] = False
    if analyzer is not None:
        vision_info = analyzer.provider.get_model_info()
        models["vision"] = vision_info.name
        checks["image_analysis"] = vision_info.supports_vision
    checks["voice"] = voice_service is not None and voice_service.available

    response_data = ReadinessResponse(
        status="ready" if all_ready else "not_ready",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
        models=models,
    )
    status_code = status.HTTP_200_OK if all_ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content=response_data.model_dump(),
    )
