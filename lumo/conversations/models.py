"""Conversation record models."""

from uuid import uuid4

from pydantic import BaseModel, Field

from lumo.models.chat import Message, utc_now_iso

LAST_MESSAGE_PREVIEW_CHARS = 100


class Conversation(BaseModel):
    """A saved chat: messages plus title, tags and timestamps."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Record id (uuid4)")
    title: str = Field(..., description="Display title")
    messages: list[Message] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)
    tags: list[str] = Field(default_factory=list, description="Topic tags")

    def summary(self) -> "ConversationSummary":
        last = self.messages[-1].content if self.messages else ""
        if len(last) > LAST_MESSAGE_PREVIEW_CHARS:
            last = last[:LAST_MESSAGE_PREVIEW_CHARS] + "..."
        return ConversationSummary(
            id=self.id,
            title=self.title,
            message_count=len(self.messages),
            last_message=last,
            created_at=self.created_at,
            updated_at=self.updated_at,
            tags=list(self.tags),
        )


class ConversationSummary(BaseModel):
    """List view of a conversation record."""

    id: str
    title: str
    message_count: int = Field(..., ge=0)
    last_message: str = Field(default="", description="Last message, at most 100 chars + '...'")
    created_at: str
    updated_at: str
    tags: list[str] = Field(default_factory=list)


class ConversationNotFoundError(Exception):
    """No conversation record with the requested id."""

    def __init__(self, conversation_id: str) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}")
