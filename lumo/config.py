"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from lumo.config import get_settings

    settings = get_settings()
    print(settings.llm.default_provider)
    print(settings.storage.data_dir)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "anthropic", "google", "local"]


class LLMSettings(BaseSettings):
    """LLM provider configuration."""

    default_provider: ProviderName = Field(
        default="google", description="Default LLM provider"
    )
    vision_provider: ProviderName | None = Field(
        None, description="Provider for image analysis (defaults to default_provider)"
    )

    # OpenAI configuration
    openai_api_key: str | None = Field(
        None,
        description="OpenAI API key",
        min_length=20,
    )
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI chat model")
    openai_vision_model: str = Field(default="gpt-4o", description="OpenAI vision model")

    # Anthropic configuration
    anthropic_api_key: str | None = Field(
        None,
        description="Anthropic API key",
        min_length=20,
    )
    anthropic_model: str = Field(
        default="claude-3-5-haiku-20241022", description="Anthropic chat model"
    )
    anthropic_vision_model: str = Field(
        default="claude-3-5-sonnet-20241022", description="Anthropic vision model"
    )

    # Google configuration
    google_api_key: str | None = Field(None, description="Google AI (Gemini) API key")
    google_model: str = Field(default="gemini-1.5-flash", description="Gemini chat model")
    google_vision_model: str = Field(
        default="gemini-1.5-flash", description="Gemini vision model"
    )

    # Local model configuration
    local_base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL for local model server (Ollama, vLLM, etc.)",
    )
    local_model: str = Field(default="llama3.1:8b", description="Local model name")
    local_vision_model: str = Field(default="llava:7b", description="Local vision model")

    # Common settings
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for chat responses",
    )
    max_tokens: int = Field(
        default=2048,
        gt=0,
        le=16000,
        description="Maximum tokens per chat response",
    )
    vision_temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=2.0,
        description="Temperature for image analysis",
    )
    vision_max_tokens: int = Field(
        default=1024,
        gt=0,
        le=16000,
        description="Maximum tokens per image description",
    )
    timeout: int = Field(
        default=60,
        gt=0,
        description="Request timeout in seconds",
    )
    history_limit: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Number of previous messages sent as context",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("openai_api_key", "anthropic_api_key", "google_api_key", mode="before")
    @classmethod
    def normalize_key(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_key(cls, v: str | None) -> str | None:
        """Validate OpenAI API key format."""
        if v and not v.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return v

    @field_validator("anthropic_api_key")
    @classmethod
    def validate_anthropic_key(cls, v: str | None) -> str | None:
        """Validate Anthropic API key format."""
        if v and not v.startswith("sk-ant-"):
            raise ValueError("Anthropic API key must start with 'sk-ant-'")
        return v

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured API key for a provider (None for local)."""
        return {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "google": self.google_api_key,
        }.get(provider)

    def is_configured(self, provider: str | None = None) -> bool:
        """Check whether a provider has the credentials it needs."""
        provider = provider or self.default_provider
        if provider == "local":
            return True
        return bool(self.api_key_for(provider))


class StorageSettings(BaseSettings):
    """Local persistence configuration."""

    data_dir: Path = Field(
        default=Path.home() / ".lumo",
        description="Directory holding conversations.json and sessions.json",
    )
    max_conversations: int = Field(
        default=100,
        gt=0,
        le=10000,
        description="Maximum saved conversation records (oldest dropped first)",
    )
    max_session_messages: int = Field(
        default=50,
        gt=0,
        description="Messages kept per chat session",
    )
    max_session_files: int = Field(
        default=10,
        gt=0,
        description="Uploaded file contexts kept per chat session",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def conversations_path(self) -> Path:
        return self.data_dir / "conversations.json"

    @property
    def sessions_path(self) -> Path:
        return self.data_dir / "sessions.json"


class UploadSettings(BaseSettings):
    """File upload limits."""

    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Maximum upload size in bytes",
    )
    file_context_max_chars: int = Field(
        default=2000,
        gt=0,
        description="Characters of each text file forwarded to the model",
    )

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        env_file=".env",
        extra="ignore",
    )


class VoiceSettings(BaseSettings):
    """Speech-to-text and text-to-speech configuration."""

    enabled: bool = Field(default=True, description="Enable voice endpoints")
    transcription_model: str = Field(default="whisper-1", description="Speech-to-text model")
    speech_model: str = Field(default="tts-1", description="Text-to-speech model")
    default_voice: str = Field(default="alloy", description="Default synthesis voice")
    default_language: str = Field(default="en-US", description="Default recognition language")

    model_config = SettingsConfigDict(
        env_prefix="VOICE_",
        env_file=".env",
        extra="ignore",
    )


class EmailSettings(BaseSettings):
    """SMTP configuration for the contact form."""

    host: str | None = Field(None, description="SMTP host")
    port: int = Field(default=587, gt=0, le=65535, description="SMTP port")
    secure: bool = Field(default=False, description="Use implicit TLS (SMTP_SSL)")
    user: str | None = Field(None, description="SMTP username (also the sender)")
    password: str | None = Field(None, description="SMTP password", validation_alias="EMAIL_PASS")
    contact_address: str = Field(
        default="support@lumo.ai",
        description="Mailbox receiving contact form submissions",
        validation_alias="CONTACT_EMAIL",
    )

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and self.password)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stdout only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by domain (llm, storage, upload, voice, email, logging).

    Environment Variables:
        ENVIRONMENT: Deployment environment (development, staging, production)
        APP_NAME: Application name for logging and page titles
        DEBUG: Enable debug mode
        API_HOST: API server host
        API_PORT: API server port
        LLM_*: LLM provider configuration (see LLMSettings)
        STORAGE_*: Local persistence (see StorageSettings)
        UPLOAD_*: Upload limits (see UploadSettings)
        VOICE_*: Voice configuration (see VoiceSettings)
        EMAIL_*: Contact form SMTP (see EmailSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.llm.default_provider
        'google'
        >>> settings.storage.max_conversations
        100
    """

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    app_name: str = Field(
        default="Lumo.AI",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        gt=0,
        le=65535,
        description="API server port",
    )

    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    voice: VoiceSettings = Field(default_factory=VoiceSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    def model_post_init(self, __context) -> None:
        """Configure logging and log the loaded configuration."""
        self.logging.configure()
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "debug": self.debug,
                "llm_provider": self.llm.default_provider,
                "data_dir": str(self.storage.data_dir),
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("LUMO_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
