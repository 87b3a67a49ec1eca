"""
Unit tests for configuration module.

Tests settings loading, validation, nested configuration, and caching.
"""

import logging

import pytest
from pydantic import ValidationError

from lumo.config import (
    EmailSettings,
    LLMSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    UploadSettings,
    clear_settings_cache,
    get_settings,
)


class TestLLMSettings:
    """Test LLM configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LLM_OPENAI_API_KEY", raising=False)

        settings = LLMSettings()

        assert settings.default_provider == "google"
        assert settings.vision_provider is None
        assert settings.temperature == 0.7
        assert settings.max_tokens == 2048
        assert settings.vision_temperature == 0.4
        assert settings.vision_max_tokens == 1024
        assert settings.history_limit == 10

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_DEFAULT_PROVIDER", "openai")
        monkeypatch.setenv("LLM_OPENAI_MODEL", "gpt-4o")
        monkeypatch.setenv("LLM_HISTORY_LIMIT", "4")

        settings = LLMSettings()

        assert settings.default_provider == "openai"
        assert settings.openai_model == "gpt-4o"
        assert settings.history_limit == 4

    def test_openai_key_requires_sk_prefix(self, monkeypatch):
        monkeypatch.setenv("LLM_OPENAI_API_KEY", "invalid-key-1234567890abcdef")

        with pytest.raises(ValidationError, match="must start with 'sk-'"):
            LLMSettings()

    def test_openai_key_minimum_length(self, monkeypatch):
        monkeypatch.setenv("LLM_OPENAI_API_KEY", "sk-short")

        with pytest.raises(ValidationError):
            LLMSettings()

    def test_anthropic_key_validation(self, monkeypatch):
        monkeypatch.setenv("LLM_ANTHROPIC_API_KEY", "sk-wrong-prefix-1234567890")

        with pytest.raises(ValidationError, match="sk-ant-"):
            LLMSettings()

    def test_empty_key_is_missing(self, monkeypatch):
        monkeypatch.setenv("LLM_GOOGLE_API_KEY", "")

        assert LLMSettings().google_api_key is None

    def test_unknown_provider_rejected(self, monkeypatch):
        monkeypatch.setenv("LLM_DEFAULT_PROVIDER", "mistral")

        with pytest.raises(ValidationError):
            LLMSettings()

    def test_is_configured(self, monkeypatch):
        settings = LLMSettings(google_api_key=None)

        assert settings.is_configured("openai") is True
        assert settings.is_configured("google") is False
        assert settings.is_configured("local") is True
        assert settings.is_configured() is False


class TestStorageAndUploadSettings:
    def test_storage_paths(self, isolated_storage):
        settings = StorageSettings()

        assert settings.data_dir == isolated_storage
        assert settings.conversations_path == isolated_storage / "conversations.json"
        assert settings.sessions_path == isolated_storage / "sessions.json"
        assert settings.max_conversations == 100

    def test_upload_limits(self):
        settings = UploadSettings()

        assert settings.max_file_size == 10 * 1024 * 1024
        assert settings.file_context_max_chars == 2000


class TestEmailSettings:
    def test_not_configured_by_default(self, monkeypatch):
        for name in ("EMAIL_HOST", "EMAIL_USER", "EMAIL_PASS"):
            monkeypatch.delenv(name, raising=False)

        assert EmailSettings().is_configured is False

    def test_env_aliases(self, monkeypatch):
        monkeypatch.setenv("EMAIL_HOST", "smtp.example.com")
        monkeypatch.setenv("EMAIL_USER", "bot@example.com")
        monkeypatch.setenv("EMAIL_PASS", "secret")
        monkeypatch.setenv("CONTACT_EMAIL", "team@example.com")

        settings = EmailSettings()

        assert settings.is_configured is True
        assert settings.password == "secret"
        assert settings.contact_address == "team@example.com"


class TestLoggingSettings:
    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_configure_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "lumo.log"

        LoggingSettings(level="WARNING", file=log_file).configure()
        logging.getLogger("lumo.test").warning("written to file")

        assert log_file.exists()
        assert logging.getLogger().level == logging.WARNING


class TestSettings:
    def test_nested_settings(self):
        settings = Settings()

        assert settings.app_name == "Lumo.AI"
        assert settings.api_port == 8000
        assert settings.is_development is True
        assert settings.llm.openai_api_key.startswith("sk-test")

    def test_production_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        assert Settings().is_production is True

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("APP_NAME", "Lumo Test")

        clear_settings_cache()

        assert get_settings() is not first
        assert get_settings().app_name == "Lumo Test"
