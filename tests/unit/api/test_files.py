"""Unit tests for the file upload endpoint."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from lumo.api.main import app
from lumo.files import FileService
from lumo.sessions import SessionStore


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def state(tmp_path):
    analyzer = MagicMock()
    analyzer.analyze = AsyncMock(return_value="A handwritten note.")
    return {
        "file_service": FileService(analyzer=analyzer, max_file_size=1024),
        "session_store": SessionStore(path=tmp_path / "sessions.json"),
    }


def test_upload_text_file(client, state):
    with patch("lumo.api.main.app_state", state):
        response = client.post(
            "/api/v1/files",
            files={"file": ("notes.md", b"# Todo\n- ship it", "text/markdown")},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["file_name"] == "notes.md"
    assert body["kind"] == "text"
    assert body["content"] == "# Todo\n- ship it"
    assert body["chat_prompt"].startswith("I've uploaded a file for analysis:")
    assert body["session_id"] is None


def test_upload_image_returns_base64(client, state):
    with patch("lumo.api.main.app_state", state):
        response = client.post(
            "/api/v1/files", files={"file": ("note.png", b"\x89PNG", "image/png")}
        )

    body = response.json()
    assert body["kind"] == "image"
    assert body["base64"] == "iVBORw=="
    assert "A handwritten note." in body["content"]


def test_upload_attaches_to_session(client, state):
    with patch("lumo.api.main.app_state", state):
        response = client.post(
            "/api/v1/files",
            files={"file": ("data.txt", b"a,b\n1,2\n", "text/plain")},
            data={"session_id": "client-1"},
        )

    assert response.json()["session_id"] == "client-1"
    session = state["session_store"].get("client-1")
    assert [f.file_name for f in session.uploaded_files] == ["data.txt"]


def test_too_large_returns_413(client, state):
    with patch("lumo.api.main.app_state", state):
        response = client.post(
            "/api/v1/files", files={"file": ("big.txt", b"x" * 2048, "text/plain")}
        )

    assert response.status_code == 413


def test_unsupported_type_returns_415(client, state):
    with patch("lumo.api.main.app_state", state):
        response = client.post(
            "/api/v1/files", files={"file": ("tool.exe", b"MZ", "application/octet-stream")}
        )

    assert response.status_code == 415
    assert "Unsupported file type" in response.json()["detail"]


def test_service_not_initialized(client):
    with patch("lumo.api.main.app_state", {"file_service": None}):
        response = client.post("/api/v1/files", files={"file": ("a.txt", b"x", "text/plain")})

    assert response.status_code == 503
