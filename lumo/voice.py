"""
Voice Service

Speech-to-text and text-to-speech through the OpenAI audio API.
"""

import logging

import openai
from openai import AsyncOpenAI

from lumo.config import LLMSettings, VoiceSettings

logger = logging.getLogger(__name__)

VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
AUDIO_FORMATS = {
    "mp3": "audio/mpeg",
    "opus": "audio/ogg",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wav": "audio/wav",
}
MIN_SPEED = 0.25
MAX_SPEED = 4.0


class VoiceError(Exception):
    """Speech request failed."""

    pass


class VoiceUnavailableError(VoiceError):
    """Voice is disabled or no OpenAI key is configured."""

    pass


class VoiceService:
    """Transcribe recordings and synthesize replies."""

    def __init__(self, settings: VoiceSettings, api_key: str | None, timeout: int = 60) -> None:
        self.settings = settings
        self.client = AsyncOpenAI(api_key=api_key, timeout=float(timeout)) if api_key else None

    @classmethod
    def from_settings(cls, voice: VoiceSettings, llm: LLMSettings) -> "VoiceService":
        return cls(voice, llm.openai_api_key, llm.timeout)

    @property
    def available(self) -> bool:
        return self.settings.enabled and self.client is not None

    def _require_client(self) -> AsyncOpenAI:
        if not self.settings.enabled:
            raise VoiceUnavailableError("Voice features are disabled")
        if self.client is None:
            raise VoiceUnavailableError("Voice features require an OpenAI API key")
        return self.client

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "recording.webm",
        language: str | None = None,
    ) -> str:
        """
        Convert recorded speech to text.

        Args:
            audio: Raw audio bytes (webm, mp3, wav, m4a, ...)
            filename: Name whose extension tells the API the container format
            language: BCP-47 tag such as "en-US"; only the language part is sent

        Raises:
            VoiceUnavailableError: If voice is disabled or unconfigured
            VoiceError: If the API call fails
        """
        client = self._require_client()
        if not audio:
            raise VoiceError("No audio data provided")
        language_code = (language or self.settings.default_language).split("-")[0].lower()
        try:
            transcription = await client.audio.transcriptions.create(
                model=self.settings.transcription_model,
                file=(filename, audio),
                language=language_code,
            )
        except openai.APIError as e:
            logger.error(f"Transcription failed: {e}")
            raise VoiceError("Speech recognition failed") from e

        text = transcription.text.strip()
        logger.info(
            "Audio transcribed",
            extra={"bytes": len(audio), "language": language_code, "chars": len(text)},
        )
        return text

    async def speak(
        self,
        text: str,
        voice: str | None = None,
        speed: float = 1.0,
        audio_format: str = "mp3",
    ) -> bytes:
        """
        Synthesize speech for text.

        Raises:
            VoiceUnavailableError: If voice is disabled or unconfigured
            VoiceError: On invalid options or API failure
        """
        client = self._require_client()
        if not text or not text.strip():
            raise VoiceError("Text is required")
        selected = voice or self.settings.default_voice
        if selected not in VOICES:
            raise VoiceError(f"Unknown voice: {selected}. Available voices: {', '.join(VOICES)}")
        if audio_format not in AUDIO_FORMATS:
            raise VoiceError(f"Unsupported audio format: {audio_format}")
        speed = min(max(speed, MIN_SPEED), MAX_SPEED)

        try:
            response = await client.audio.speech.create(
                model=self.settings.speech_model,
                voice=selected,
                input=text,
                speed=speed,
                response_format=audio_format,
            )
        except openai.APIError as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise VoiceError("Speech synthesis failed") from e

        audio = response.content
        logger.info(
            "Speech synthesized",
            extra={"voice": selected, "chars": len(text), "bytes": len(audio)},
        )
        return audio

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.close()
