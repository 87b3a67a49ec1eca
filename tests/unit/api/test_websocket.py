"""
Unit Tests for the Streaming Chat WebSocket

Exercises /ws/chat with a mocked LLM provider.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from lumo.api.main import app
from lumo.chat import ChatService


class TestChatWebSocket:
    """Test suite for /ws/chat."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    @pytest.fixture
    def state(self, mock_llm_provider):
        return {"chat_service": ChatService(mock_llm_provider)}

    def test_streams_chunks_then_complete(self, client, state, mock_llm_provider):
        mock_llm_provider.set_stream(["Hello", ", ", "world"])

        with patch("lumo.api.main.app_state", state):
            with client.websocket_connect("/ws/chat") as websocket:
                websocket.send_json({"message": "Say hello", "persona_id": "general"})
                events = [websocket.receive_json() for _ in range(4)]

        assert [e["event"] for e in events] == [
            "answer_chunk",
            "answer_chunk",
            "answer_chunk",
            "complete",
        ]
        assert events[-1]["response"] == "Hello, world"
        assert events[-1]["latency_ms"] >= 0

    def test_empty_message_is_rejected(self, client, state):
        with patch("lumo.api.main.app_state", state):
            with client.websocket_connect("/ws/chat") as websocket:
                websocket.send_json({"message": "  "})
                event = websocket.receive_json()

        assert event["event"] == "error"
        assert event["error"] == "validation_error"

    def test_invalid_payload_is_rejected(self, client, state):
        with patch("lumo.api.main.app_state", state):
            with client.websocket_connect("/ws/chat") as websocket:
                websocket.send_json({"message": "hi", "history": "not-a-list"})
                event = websocket.receive_json()

        assert event["error"] == "validation_error"

    def test_missing_provider(self, client):
        with patch("lumo.api.main.app_state", {"chat_service": ChatService(None)}):
            with client.websocket_connect("/ws/chat") as websocket:
                websocket.send_json({"message": "hi"})
                event = websocket.receive_json()

        assert event["error"] == "service_unavailable"

    def test_rate_limit_error_event(self, client, state, mock_llm_provider):
        async def _failing(request):
            raise RuntimeError("429 Too Many Requests")
            yield

        mock_llm_provider.stream.side_effect = _failing

        with patch("lumo.api.main.app_state", state):
            with client.websocket_connect("/ws/chat") as websocket:
                websocket.send_json({"message": "hi"})
                event = websocket.receive_json()

        assert event["event"] == "error"
        assert event["error"] == "rate_limited"
        assert event["details"] == "429 Too Many Requests"
