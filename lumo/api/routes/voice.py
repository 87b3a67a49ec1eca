"""
Voice Routes

Speech-to-text for recorded input and text-to-speech for replies.
"""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import Response

from lumo.models.api import SpeakRequest, TranscriptionResponse
from lumo.voice import AUDIO_FORMATS, VoiceError, VoiceService, VoiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_voice_service() -> VoiceService:
    from lumo.api.main import app_state

    service = app_state.get("voice_service")
    if service is None:
        raise VoiceUnavailableError("Voice service not initialized")
    return service


def _voice_http_error(error: VoiceError) -> HTTPException:
    # errors chained from the provider are upstream failures, the rest are bad input
    code = status.HTTP_502_BAD_GATEWAY if error.__cause__ else status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(error))


@router.post("/voice/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    audio: UploadFile = File(...),
    language: str | None = Form(default=None),
) -> TranscriptionResponse:
    """Transcribe a recording in the given language (default en-US)."""
    service = _get_voice_service()
    data = await audio.read()
    language = language or service.settings.default_language
    try:
        text = await service.transcribe(
            data, filename=audio.filename or "recording.webm", language=language
        )
    except VoiceUnavailableError:
        raise
    except VoiceError as e:
        raise _voice_http_error(e) from e
    return TranscriptionResponse(text=text, language=language)


@router.post("/voice/speak")
async def speak(request: SpeakRequest) -> Response:
    """Synthesize speech and return the audio file."""
    service = _get_voice_service()
    try:
        audio = await service.speak(
            request.text,
            voice=request.voice,
            speed=request.speed,
            audio_format=request.format,
        )
    except VoiceUnavailableError:
        raise
    except VoiceError as e:
        raise _voice_http_error(e) from e
    return Response(content=audio, media_type=AUDIO_FORMATS[request.format])
