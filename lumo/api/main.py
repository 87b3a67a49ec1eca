"""
FastAPI Application

Main FastAPI application for Lumo.AI with:
- Lifespan management for provider and store initialization/cleanup
- CORS middleware for browser clients
- Global exception handlers for domain errors
- Chat, file, session, conversation, export, voice and contact routes
- Landing, privacy, terms and support pages

Usage:
    uvicorn lumo.api.main:app --reload --port 8000
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lumo import __version__
from lumo.api import websocket
from lumo.api.routes import (
    chat,
    contact,
    conversations,
    exports,
    files,
    health,
    pages,
    personas,
    sessions,
    themes,
    voice,
)
from lumo.chat import ChatService, ChatServiceError
from lumo.config import get_settings
from lumo.conversations import ConversationNotFoundError, ConversationStore
from lumo.files import FileProcessingError, FileService, ImageAnalyzer
from lumo.llm import LLMProviderFactory
from lumo.pages import PageNotFoundError
from lumo.prompts import PromptLoader
from lumo.sessions import SessionStore
from lumo.voice import VoiceService, VoiceUnavailableError

logger = logging.getLogger(__name__)

# Global state for services and stores
app_state = {
    "chat_service": None,
    "image_analyzer": None,
    "file_service": None,
    "session_store": None,
    "conversation_store": None,
    "voice_service": None,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan context manager for startup and shutdown.

    Initializes:
    - Chat provider and chat service
    - Vision provider and image analyzer
    - File service
    - Session and conversation stores
    - Voice service
    """
    from lumo.settings_store import apply_config_defaults

    apply_config_defaults()
    config = get_settings()
    logger.info("Starting Lumo.AI API server...")

    prompts = PromptLoader()

    try:
        # Chat provider
        logger.info("Initializing chat provider...")
        try:
            provider = LLMProviderFactory.create_default_provider(config.llm)
        except ValueError as e:
            logger.warning(f"Chat provider unavailable: {e}")
            provider = None
        app_state["chat_service"] = ChatService(
            provider,
            history_limit=config.llm.history_limit,
            max_file_chars=config.upload.file_context_max_chars,
            prompts=prompts,
        )

        # Vision provider
        logger.info("Initializing vision provider...")
        try:
            analyzer = ImageAnalyzer(
                LLMProviderFactory.create_vision_provider(config.llm), prompts=prompts
            )
        except ValueError as e:
            logger.warning(f"Image analysis unavailable: {e}")
            analyzer = None
        if analyzer is not None:
            vision_info = analyzer.provider.get_model_info()
            if not vision_info.supports_vision:
                logger.warning(
                    f"Vision model {vision_info.name} does not list image support"
                )
        app_state["image_analyzer"] = analyzer
        app_state["file_service"] = FileService(
            analyzer=analyzer, max_file_size=config.upload.max_file_size
        )

        # Local stores
        logger.info(f"Using data directory {config.storage.data_dir}")
        app_state["session_store"] = SessionStore()
        app_state["conversation_store"] = ConversationStore()

        # Voice
        voice_service = VoiceService.from_settings(config.voice, config.llm)
        if not voice_service.available:
            logger.warning("Voice features disabled (VOICE_ENABLED=false or no OpenAI key)")
        app_state["voice_service"] = voice_service

        logger.info("Lumo.AI API server started successfully")

        yield  # Application runs here

    finally:
        logger.info("Shutting down Lumo.AI API server...")

        chat_service = app_state["chat_service"]
        if chat_service is not None and chat_service.provider is not None:
            try:
                await chat_service.provider.aclose()
                logger.info("Chat provider closed")
            except Exception as e:
                logger.error(f"Error closing chat provider: {e}")

        if app_state["image_analyzer"] is not None:
            try:
                await app_state["image_analyzer"].provider.aclose()
                logger.info("Vision provider closed")
            except Exception as e:
                logger.error(f"Error closing vision provider: {e}")

        if app_state["voice_service"] is not None:
            try:
                await app_state["voice_service"].aclose()
            except Exception as e:
                logger.error(f"Error closing voice client: {e}")

        logger.info("Lumo.AI API server shut down complete")


# Create FastAPI app
app = FastAPI(
    title="Lumo.AI API",
    description="AI chat assistant with file analysis, voice and saved conversations",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for browser clients
cors_origins_env = os.getenv("CORS_ORIGINS", "")
cors_origins = (
    [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
    if cors_origins_env
    else ["http://localhost:3000", "http://localhost:5173"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(ChatServiceError)
async def chat_error_handler(request: Request, exc: ChatServiceError) -> JSONResponse:
    """Handle chat failures with the user-facing message."""
    logger.error(f"Chat error: {exc.detail}", extra={"status_code": exc.status_code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.detail},
    )


@app.exception_handler(FileProcessingError)
async def file_error_handler(request: Request, exc: FileProcessingError) -> JSONResponse:
    """Handle upload errors that escape the files router."""
    logger.error(f"File processing error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "file_error", "message": str(exc)},
    )


@app.exception_handler(ConversationNotFoundError)
async def conversation_not_found_handler(
    request: Request, exc: ConversationNotFoundError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "message": str(exc)},
    )


@app.exception_handler(VoiceUnavailableError)
async def voice_unavailable_handler(request: Request, exc: VoiceUnavailableError) -> JSONResponse:
    logger.warning(f"Voice request rejected: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "voice_unavailable", "message": str(exc)},
    )


@app.exception_handler(PageNotFoundError)
async def page_not_found_handler(request: Request, exc: PageNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "message": str(exc)},
    )


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(chat.router, prefix="/api/v1", tags=["chat"])
app.include_router(files.router, prefix="/api/v1", tags=["files"])
app.include_router(sessions.router, prefix="/api/v1", tags=["sessions"])
app.include_router(conversations.router, prefix="/api/v1", tags=["conversations"])
app.include_router(personas.router, prefix="/api/v1", tags=["personas"])
app.include_router(themes.router, prefix="/api/v1", tags=["themes"])
app.include_router(exports.router, prefix="/api/v1", tags=["exports"])
app.include_router(voice.router, prefix="/api/v1", tags=["voice"])
app.include_router(contact.router, prefix="/api/v1", tags=["contact"])
app.include_router(websocket.router, tags=["websocket"])
app.include_router(pages.router, tags=["pages"])


def get_chat_service() -> ChatService:
    """Get the initialized chat service."""
    if app_state["chat_service"] is None:
        raise RuntimeError("Chat service not initialized")
    return app_state["chat_service"]
