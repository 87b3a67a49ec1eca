"""Saved conversation records: storage, search and export."""

from lumo.conversations.formatting import export_filename, extract_tags, generate_title
from lumo.conversations.models import (
    Conversation,
    ConversationNotFoundError,
    ConversationSummary,
)
from lumo.conversations.store import ConversationStore

__all__ = [
    "Conversation",
    "ConversationNotFoundError",
    "ConversationStore",
    "ConversationSummary",
    "export_filename",
    "extract_tags",
    "generate_title",
]
