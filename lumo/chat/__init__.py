"""Chat proxy: prompt assembly and the provider call."""

from lumo.chat.context import build_file_context, build_messages
from lumo.chat.service import (
    APOLOGY_MESSAGE,
    ChatReply,
    ChatService,
    ChatServiceError,
    classify_error,
)

__all__ = [
    "APOLOGY_MESSAGE",
    "ChatReply",
    "ChatService",
    "ChatServiceError",
    "build_file_context",
    "build_messages",
    "classify_error",
]
