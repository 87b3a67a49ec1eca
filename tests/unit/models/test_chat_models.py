"""Unit tests for the shared chat and API models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from lumo.models.api import ChatRequest, ExportRequest, SpeakRequest
from lumo.models.chat import FileContext, Message


class TestMessage:
    def test_defaults(self):
        msg = Message(role="user", content="Hello")

        assert len(msg.id) == 36
        assert datetime.fromisoformat(msg.timestamp).tzinfo is not None
        assert msg.file_context is None

    def test_ids_are_unique(self):
        assert Message(role="user", content="a").id != Message(role="user", content="a").id

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="system", content="x")

    def test_round_trips_with_file(self):
        msg = Message(
            role="user",
            content="see file",
            file_context=FileContext(file_name="a.png", content="analysis", base64="aGk="),
        )

        restored = Message.model_validate(msg.model_dump(mode="json"))

        assert restored == msg


class TestFileContext:
    def test_snake_case_keys(self):
        ctx = FileContext.model_validate({"file_name": "a.txt", "content": "hi"})

        dumped = ctx.model_dump()
        assert dumped["file_name"] == "a.txt"
        assert dumped["file_type"] == ""
        assert "fileName" not in dumped

    def test_missing_file_name_rejected(self):
        with pytest.raises(ValidationError):
            FileContext.model_validate({"fileName": "a.txt", "content": "hi"})


class TestApiModels:
    def test_chat_request_defaults(self):
        request = ChatRequest()

        assert request.message == ""
        assert request.history == []
        assert request.file_context == []
        assert request.persona_id is None

    def test_export_request_format(self):
        assert ExportRequest(content="x").format == "pdf"
        with pytest.raises(ValidationError):
            ExportRequest(content="x", format="rtf")
        with pytest.raises(ValidationError):
            ExportRequest(content="")

    def test_speak_request_requires_text(self):
        with pytest.raises(ValidationError):
            SpeakRequest(text="")
