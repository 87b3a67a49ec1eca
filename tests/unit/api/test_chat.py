"""
Unit Tests for Chat Endpoints

Tests /api/v1/chat and /api/v1/analyze-image with mocked services.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from lumo.api.main import app
from lumo.chat import ChatReply, ChatServiceError
from lumo.files import ImageAnalysisError


class TestChatEndpoint:
    """Test suite for the chat proxy."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    @pytest.fixture
    def chat_service(self):
        service = MagicMock()
        service.provider = MagicMock()
        service.reply = AsyncMock(
            return_value=ChatReply(response="Hello! How can I help?", provider="mock", model="m")
        )
        return service

    def test_successful_reply(self, client, chat_service):
        with patch("lumo.api.main.app_state", {"chat_service": chat_service}):
            response = client.post(
                "/api/v1/chat",
                json={
                    "message": "Hi",
                    "history": [{"role": "user", "content": "Earlier question"}],
                    "file_context": [
                        {"file_name": "a.txt", "file_type": "text/plain", "content": "data"}
                    ],
                    "persona_id": "code-master",
                },
            )

        assert response.status_code == 200
        assert response.json() == {"response": "Hello! How can I help?", "error": None}
        call = chat_service.reply.call_args
        assert call.args[0] == "Hi"
        assert call.kwargs["history"][0].content == "Earlier question"
        assert call.kwargs["files"][0].file_name == "a.txt"
        assert call.kwargs["persona_id"] == "code-master"

    def test_empty_message_returns_400(self, client, chat_service):
        with patch("lumo.api.main.app_state", {"chat_service": chat_service}):
            response = client.post("/api/v1/chat", json={"message": "   "})

        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}
        chat_service.reply.assert_not_called()

    def test_missing_provider_returns_500(self, client, chat_service):
        chat_service.provider = None

        with patch("lumo.api.main.app_state", {"chat_service": chat_service}):
            response = client.post("/api/v1/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "LLM provider is not configured"}

    @pytest.mark.parametrize("status_code", [429, 413, 500])
    def test_provider_errors_keep_status(self, client, chat_service, status_code):
        chat_service.reply.side_effect = ChatServiceError(
            "friendly message", status_code, detail="raw cause"
        )

        with patch("lumo.api.main.app_state", {"chat_service": chat_service}):
            response = client.post("/api/v1/chat", json={"message": "Hi"})

        assert response.status_code == status_code
        assert response.json() == {"response": "friendly message", "error": "raw cause"}

    def test_invalid_history_role_rejected(self, client, chat_service):
        with patch("lumo.api.main.app_state", {"chat_service": chat_service}):
            response = client.post(
                "/api/v1/chat",
                json={"message": "Hi", "history": [{"role": "system", "content": "x"}]},
            )

        assert response.status_code == 422


class TestAnalyzeImageEndpoint:
    """Test suite for image analysis."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    @pytest.fixture
    def analyzer(self):
        analyzer = MagicMock()
        analyzer.analyze = AsyncMock(return_value="A red bicycle.")
        return analyzer

    def test_raw_base64(self, client, analyzer):
        with patch("lumo.api.main.app_state", {"image_analyzer": analyzer}):
            response = client.post(
                "/api/v1/analyze-image", json={"image": "aGVsbG8=", "mime_type": "image/jpeg"}
            )

        assert response.status_code == 200
        assert response.json() == {"description": "A red bicycle.", "success": True}
        analyzer.analyze.assert_awaited_once_with("aGVsbG8=", "image/jpeg")

    def test_data_url_is_split(self, client, analyzer):
        with patch("lumo.api.main.app_state", {"image_analyzer": analyzer}):
            client.post("/api/v1/analyze-image", json={"image": "data:image/webp;base64,QUJD"})

        analyzer.analyze.assert_awaited_once_with("QUJD", "image/webp")

    def test_missing_image(self, client, analyzer):
        with patch("lumo.api.main.app_state", {"image_analyzer": analyzer}):
            response = client.post("/api/v1/analyze-image", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "No image data provided"}

    def test_no_vision_provider(self, client):
        with patch("lumo.api.main.app_state", {"image_analyzer": None}):
            response = client.post("/api/v1/analyze-image", json={"image": "aGk="})

        assert response.status_code == 500

    def test_analysis_failure(self, client, analyzer):
        analyzer.analyze.side_effect = ImageAnalysisError(
            "Image analysis temporarily unavailable due to high usage", "429"
        )

        with patch("lumo.api.main.app_state", {"image_analyzer": analyzer}):
            response = client.post("/api/v1/analyze-image", json={"image": "aGk="})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Image analysis temporarily unavailable due to high usage",
            "success": False,
        }
