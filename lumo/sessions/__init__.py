"""Per-client chat sessions and their JSON store."""

from lumo.sessions.models import ChatSession
from lumo.sessions.store import SessionStore

__all__ = ["ChatSession", "SessionStore"]
