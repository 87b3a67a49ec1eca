"""Titles, topic tags and text exports for conversation records."""

import json
import re
from collections.abc import Sequence
from datetime import datetime
from typing import Literal

from lumo.conversations.models import Conversation
from lumo.models.chat import Message

ExportFormat = Literal["json", "txt", "md"]

TITLE_MAX_CHARS = 50

TAG_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(code|coding|programming|javascript|python|react|typescript)\b"), "coding"),
    (re.compile(r"\b(write|writing|story|creative|poem|article)\b"), "writing"),
    (re.compile(r"\b(math|mathematics|calculate|equation|formula)\b"), "math"),
    (re.compile(r"\b(help|question|how to|explain|tutorial)\b"), "help"),
    (re.compile(r"\b(business|marketing|strategy|plan)\b"), "business"),
    (re.compile(r"\b(design|ui|ux|interface|layout)\b"), "design"),
)

MEDIA_TYPES = {
    "json": "application/json",
    "txt": "text/plain",
    "md": "text/markdown",
}


def generate_title(messages: Sequence[Message], today: datetime | None = None) -> str:
    """First user message cut to 50 chars, or "Conversation <date>"."""
    for msg in messages:
        if msg.role == "user":
            title = msg.content[:TITLE_MAX_CHARS]
            return title + "..." if len(title) < len(msg.content) else title
    date = (today or datetime.now()).strftime("%Y-%m-%d")
    return f"Conversation {date}"


def extract_tags(messages: Sequence[Message]) -> list[str]:
    content = " ".join(msg.content for msg in messages).lower()
    return [tag for pattern, tag in TAG_PATTERNS if pattern.search(content)]


def export_filename(title: str, export_format: str) -> str:
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE)}.{export_format}"


def _format_datetime(value: str) -> str:
    try:
        return datetime.fromisoformat(value).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return value


def _format_time(value: str) -> str:
    try:
        return datetime.fromisoformat(value).astimezone().strftime("%H:%M:%S")
    except ValueError:
        return value


def format_as_text(conversation: Conversation) -> str:
    output = f"Conversation: {conversation.title}\n"
    output += f"Created: {_format_datetime(conversation.created_at)}\n"
    output += f"Updated: {_format_datetime(conversation.updated_at)}\n"
    output += f"Tags: {', '.join(conversation.tags)}\n\n"
    output += "=" * 50 + "\n\n"
    for msg in conversation.messages:
        role = "You" if msg.role == "user" else "Lumo.AI"
        output += f"[{_format_time(msg.timestamp)}] {role}:\n{msg.content}\n\n"
    return output


def format_as_markdown(conversation: Conversation) -> str:
    output = f"# {conversation.title}\n\n"
    output += f"**Created:** {_format_datetime(conversation.created_at)}  \n"
    output += f"**Updated:** {_format_datetime(conversation.updated_at)}  \n"
    output += f"**Tags:** {', '.join(conversation.tags)}  \n\n"
    output += "---\n\n"
    for msg in conversation.messages:
        role = "👤 **You**" if msg.role == "user" else "🤖 **Lumo.AI**"
        output += f"## {role} *({_format_time(msg.timestamp)})*\n\n{msg.content}\n\n"
    return output


def format_conversation(conversation: Conversation, export_format: ExportFormat = "txt") -> str:
    if export_format == "json":
        return json.dumps(conversation.model_dump(mode="json"), indent=2, ensure_ascii=False)
    if export_format == "md":
        return format_as_markdown(conversation)
    return format_as_text(conversation)
