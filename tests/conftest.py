"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging

import pytest

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires API keys and external services)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )
    config.addinivalue_line("markers", "slow: mark test as slow (takes more than 1 second)")
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Configure logging for tests.

    Sets up log capture and configures log levels.
    This fixture runs automatically for all tests.
    """
    caplog.set_level(logging.DEBUG)
    yield


@pytest.fixture
def disable_logging():
    """
    Disable logging for specific tests.

    Use this for tests that generate excessive logs.
    """
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_storage(tmp_path, monkeypatch):
    """
    Point every store and the preferences file at a temporary directory.

    Runs automatically so no test reads or writes ~/.lumo.
    """
    from lumo import settings_store
    from lumo.config import get_settings

    data_dir = tmp_path / "data"
    config_dir = tmp_path / "config"
    monkeypatch.setenv("STORAGE_DATA_DIR", str(data_dir))
    monkeypatch.setattr(settings_store, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(settings_store, "CONFIG_PATH", config_dir / "config.json")
    get_settings.cache_clear()
    yield data_dir
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def mock_api_keys(monkeypatch):
    """
    Use a fake OpenAI key and no Gemini key.

    This prevents tests from attempting real API calls.
    Runs automatically for all tests.
    """
    from lumo.config import get_settings

    get_settings.cache_clear()
    test_key = "sk-test-key-1234567890-abcdefghijklmnop"  # 20+ chars
    monkeypatch.setenv("LLM_OPENAI_API_KEY", test_key)
    monkeypatch.delenv("LLM_GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("LLM_DEFAULT_PROVIDER", raising=False)
    yield test_key
    get_settings.cache_clear()


# ============================================================================
# Mock LLM Provider
# ============================================================================


@pytest.fixture
def mock_llm_provider():
    """
    Mock LLM provider for testing the chat service and image analyzer.

    Usage:
        def test_chat(mock_llm_provider):
            mock_llm_provider.set_response("test response")
            reply = await service.reply("hi")
    """
    from unittest.mock import AsyncMock, MagicMock

    from lumo.llm.models import LLMResponse, LLMStreamChunk, LLMUsage

    class MockLLMProvider:
        def __init__(self):
            self.provider_name = "mock"
            self.generate = AsyncMock()
            self.stream = MagicMock()
            self.aclose = AsyncMock()
            self.count_tokens = MagicMock(return_value=100)

        def set_response(self, response: str):
            """Set the response that generate() will return."""
            self.generate.return_value = LLMResponse(
                content=response,
                model="mock-model",
                usage=LLMUsage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
                finish_reason="stop",
                provider="mock",
                metadata={},
            )

        def set_stream(self, chunks: list[str]):
            """Set the chunks that stream() will yield."""

            async def _stream(request):
                for chunk in chunks:
                    yield LLMStreamChunk(content=chunk)

            self.stream.side_effect = _stream

    return MockLLMProvider()


# ============================================================================
# Common Test Data
# ============================================================================


@pytest.fixture
def sample_messages():
    """A short user/assistant exchange."""
    from lumo.models.chat import Message

    return [
        Message(role="user", content="How do I write a Python function?"),
        Message(role="assistant", content="Use the def keyword followed by a name."),
    ]
