"""
Chat Models

Messages and uploaded-file context shared by sessions, conversation records
and the chat proxy.
"""

from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


class FileContext(BaseModel):
    """An uploaded file kept alongside the chat as model context."""

    file_name: str = Field(..., description="Original file name")
    file_type: str = Field(default="", description="MIME type of the upload")
    content: str = Field(..., description="Extracted content or image analysis")
    base64: str | None = Field(default=None, description="Base64 image data (images only)")
    uploaded_at: str = Field(default_factory=utc_now_iso, description="ISO upload time")


class Message(BaseModel):
    """One chat message."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Message id")
    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message content")
    timestamp: str = Field(default_factory=utc_now_iso, description="ISO creation time")
    file_context: FileContext | None = Field(
        default=None, description="File attached when the message was sent"
    )
