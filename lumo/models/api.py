"""
API Request/Response Models

Pydantic models for FastAPI endpoints.
"""

from typing import Literal

from pydantic import BaseModel, Field

from lumo.models.chat import FileContext, Message


class HistoryMessage(BaseModel):
    """Chat message in conversation history."""

    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(default="", description="Message content")


class ChatRequest(BaseModel):
    """Request model for the chat proxy."""

    message: str = Field(default="", description="User message")
    history: list[HistoryMessage] = Field(
        default_factory=list,
        description="Previous messages in the conversation",
    )
    file_context: list[FileContext] = Field(
        default_factory=list,
        description="Uploaded files to include as context",
    )
    persona_id: str | None = Field(default=None, description="Persona preset id")

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Summarize the uploaded report",
                "history": [{"role": "user", "content": "Hi"}],
                "file_context": [],
                "persona_id": "data-scientist",
            }
        }
    }


class ChatResponse(BaseModel):
    """Response model for the chat proxy."""

    response: str = Field(..., description="Assistant reply")
    error: str | None = Field(default=None, description="Raw error detail when the call failed")


class AnalyzeImageRequest(BaseModel):
    image: str = Field(default="", description="Base64 image data or a data: URL")
    mime_type: str = Field(default="image/png", description="Image MIME type")


class AnalyzeImageResponse(BaseModel):
    description: str = Field(..., description="Image analysis")
    success: bool = Field(default=True)


class FileUploadResponse(BaseModel):
    """Processed upload plus the message to send on the user's behalf."""

    file_name: str
    file_type: str
    file_size: int
    kind: str
    content: str = Field(..., description="Extracted content or image analysis")
    base64: str | None = Field(default=None, description="Base64 image data (images only)")
    chat_prompt: str = Field(..., description="Formatted message for the chat")
    session_id: str | None = Field(default=None, description="Session the file was attached to")


class SendMessageRequest(BaseModel):
    content: str = Field(default="", description="Message text")


class SendMessageResponse(BaseModel):
    message: Message = Field(..., description="Assistant reply (or apology on failure)")
    error: str | None = Field(default=None, description="Raw error detail when the call failed")


class EditMessageRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Replacement content")


class PreferencesRequest(BaseModel):
    """Session preferences; omitted fields are left unchanged."""

    language: str | None = Field(default=None, description="BCP-47 language tag")
    persona_id: str | None = Field(default=None, description="Persona preset id")
    theme_id: str | None = Field(default=None, description="Theme id")


class DeleteResponse(BaseModel):
    ok: bool = True
    deleted: bool = Field(..., description="Whether anything was removed")


class ConversationCreateRequest(BaseModel):
    messages: list[Message] = Field(..., min_length=1, description="Messages to save")
    title: str | None = Field(default=None, description="Custom title")


class ConversationUpdateRequest(BaseModel):
    messages: list[Message] = Field(..., description="Replacement messages")
    title: str | None = Field(default=None, description="New title")


class ExportRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Response text to export")
    format: Literal["pdf", "docx", "xlsx", "txt", "md"] = Field(
        default="pdf", description="Document format"
    )
    filename: str | None = Field(default=None, description="File name without extension")


class ExportSuggestionsRequest(BaseModel):
    content: str = Field(default="", description="Response text")


class ExportSuggestionsResponse(BaseModel):
    formats: list[str] = Field(..., description="Suggested formats, best first")


class SpeakRequest(BaseModel):
    text: str = Field(..., min_length=1, description="Text to synthesize")
    voice: str | None = Field(default=None, description="Voice name")
    speed: float = Field(default=1.0, description="Playback speed (0.25-4.0)")
    format: str = Field(default="mp3", description="Audio container")


class TranscriptionResponse(BaseModel):
    text: str
    language: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Current timestamp")


class ReadinessResponse(BaseModel):
    """Response model for readiness check endpoint."""

    status: str = Field(..., description="Readiness status")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Current timestamp")
    checks: dict[str, bool] = Field(..., description="Component readiness checks")
    models: dict[str, str] = Field(
        default_factory=dict, description="Model names in use, keyed by role"
    )
