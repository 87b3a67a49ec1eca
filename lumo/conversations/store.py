"""Storage utilities for saved conversation records (conversations.json)."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from lumo.config import get_settings
from lumo.conversations.formatting import (
    ExportFormat,
    extract_tags,
    format_conversation,
    generate_title,
)
from lumo.conversations.models import (
    Conversation,
    ConversationNotFoundError,
    ConversationSummary,
)
from lumo.models.chat import Message, utc_now_iso
from lumo.storage import read_json, write_json

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Persist conversation records most-recent-first in a JSON file.

    New records are inserted at the front and the list is capped at
    max_conversations; updates keep a record's position.
    """

    def __init__(self, path: Path | None = None, max_conversations: int | None = None) -> None:
        storage = get_settings().storage
        self.path = path or storage.conversations_path
        self.max_conversations = max_conversations or storage.max_conversations
        self._lock = threading.Lock()

    def save_conversation(
        self, messages: Sequence[Message], title: str | None = None
    ) -> Conversation:
        conversation = Conversation(
            title=title or generate_title(messages),
            messages=list(messages),
            tags=extract_tags(messages),
        )
        with self._lock:
            conversations = self._load()
            conversations.insert(0, conversation)
            dropped = len(conversations) - self.max_conversations
            if dropped > 0:
                del conversations[self.max_conversations :]
                logger.info(f"Dropped {dropped} oldest conversation(s) over the limit")
            self._save(conversations)
        logger.info(
            "Conversation saved",
            extra={"conversation_id": conversation.id, "messages": len(conversation.messages)},
        )
        return conversation

    def update_conversation(
        self,
        conversation_id: str,
        messages: Sequence[Message],
        title: str | None = None,
    ) -> Conversation | None:
        """Replace messages (and optionally title); unknown ids return None."""
        with self._lock:
            conversations = self._load()
            for index, conversation in enumerate(conversations):
                if conversation.id != conversation_id:
                    continue
                updated = conversation.model_copy(
                    update={
                        "messages": list(messages),
                        "updated_at": utc_now_iso(),
                        "tags": extract_tags(messages),
                        "title": title or conversation.title,
                    }
                )
                conversations[index] = updated
                self._save(conversations)
                return updated
        return None

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        for conversation in self._load():
            if conversation.id == conversation_id:
                return conversation
        return None

    def list_conversations(self) -> list[Conversation]:
        return self._load()

    def list_summaries(self) -> list[ConversationSummary]:
        return [conversation.summary() for conversation in self._load()]

    def delete_conversation(self, conversation_id: str) -> bool:
        with self._lock:
            conversations = self._load()
            remaining = [conv for conv in conversations if conv.id != conversation_id]
            if len(remaining) == len(conversations):
                return False
            self._save(remaining)
        return True

    def search(self, query: str) -> list[ConversationSummary]:
        """Case-insensitive substring match over titles, messages and tags."""
        needle = query.lower()
        return [
            conversation.summary()
            for conversation in self._load()
            if needle in conversation.title.lower()
            or any(needle in msg.content.lower() for msg in conversation.messages)
            or any(needle in tag.lower() for tag in conversation.tags)
        ]

    def export_conversation(
        self, conversation_id: str, export_format: ExportFormat = "txt"
    ) -> str:
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return format_conversation(conversation, export_format)

    def clear(self) -> None:
        with self._lock:
            self._save([])

    def _load(self) -> list[Conversation]:
        raw = read_json(self.path, [])
        if not isinstance(raw, list):
            logger.warning(f"Conversation store {self.path} is not a JSON list; starting empty")
            return []
        conversations = []
        for item in raw:
            try:
                conversations.append(Conversation.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid conversation record: {e}")
        return conversations

    def _save(self, conversations: list[Conversation]) -> None:
        write_json(self.path, [conv.model_dump(mode="json") for conv in conversations])
