"""Storage for per-client chat sessions (sessions.json)."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from lumo.config import get_settings
from lumo.sessions.models import ChatSession
from lumo.storage import read_json, write_json

logger = logging.getLogger(__name__)


class SessionStore:
    """Persist chat session snapshots keyed by session id."""

    def __init__(
        self,
        path: Path | None = None,
        max_messages: int | None = None,
        max_files: int | None = None,
    ) -> None:
        storage = get_settings().storage
        self.path = path or storage.sessions_path
        self.max_messages = max_messages or storage.max_session_messages
        self.max_files = max_files or storage.max_session_files
        self._lock = threading.Lock()

    def get(self, session_id: str) -> ChatSession | None:
        raw = self._read().get(session_id)
        if raw is None:
            return None
        try:
            return ChatSession.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding invalid session {session_id}: {e}")
            return None

    def get_or_create(self, session_id: str) -> ChatSession:
        return self.get(session_id) or ChatSession(session_id=session_id)

    def save(self, session: ChatSession) -> ChatSession:
        """Persist a trimmed snapshot and return it."""
        snapshot = session.trimmed(self.max_messages, self.max_files)
        with self._lock:
            sessions = self._read()
            sessions[session.session_id] = snapshot.model_dump(mode="json")
            write_json(self.path, sessions)
        logger.debug(
            "Session saved",
            extra={
                "session_id": session.session_id,
                "messages": len(snapshot.messages),
                "files": len(snapshot.uploaded_files),
            },
        )
        return snapshot

    def delete(self, session_id: str) -> bool:
        with self._lock:
            sessions = self._read()
            if sessions.pop(session_id, None) is None:
                return False
            write_json(self.path, sessions)
        return True

    def list_ids(self) -> list[str]:
        return list(self._read().keys())

    def _read(self) -> dict:
        data = read_json(self.path, {})
        if not isinstance(data, dict):
            logger.warning(f"Session store {self.path} is not a JSON object; starting empty")
            return {}
        return data
