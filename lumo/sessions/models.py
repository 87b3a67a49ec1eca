"""Per-client chat session state."""

import logging

from pydantic import BaseModel, Field

from lumo.models.chat import FileContext, Message

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en-US"
DEFAULT_PERSONA_ID = "general"


class ChatSession(BaseModel):
    """
    Chat state for one client.

    Mutators change the session in place; persist it with SessionStore.save().
    """

    session_id: str = Field(..., min_length=1, description="Opaque client-chosen id")
    messages: list[Message] = Field(default_factory=list)
    uploaded_files: list[FileContext] = Field(default_factory=list)
    language: str = Field(default=DEFAULT_LANGUAGE, description="Speech/response language")
    persona_id: str = Field(default=DEFAULT_PERSONA_ID, description="Selected persona")
    theme_id: str | None = Field(default=None, description="Selected theme")
    error: str | None = Field(default=None, description="Last send error, if any")
    is_loading: bool = Field(default=False, description="A reply is in flight")

    def add_message(
        self,
        role: str,
        content: str,
        file_context: FileContext | None = None,
    ) -> Message:
        message = Message(role=role, content=content, file_context=file_context)
        self.messages.append(message)
        return message

    def clear_messages(self) -> None:
        self.messages = []
        self.error = None

    def delete_message(self, message_id: str) -> bool:
        remaining = [msg for msg in self.messages if msg.id != message_id]
        deleted = len(remaining) != len(self.messages)
        self.messages = remaining
        return deleted

    def edit_message(self, message_id: str, content: str) -> Message | None:
        for msg in self.messages:
            if msg.id == message_id:
                msg.content = content
                return msg
        return None

    def set_messages(self, messages: list[Message]) -> None:
        self.messages = list(messages)

    def add_file_context(self, file_context: FileContext) -> None:
        self.uploaded_files.append(file_context)

    def clear_file_context(self) -> None:
        self.uploaded_files = []

    def set_language(self, language: str) -> None:
        self.language = language

    def set_persona(self, persona_id: str) -> None:
        self.persona_id = persona_id

    def set_theme(self, theme_id: str | None) -> None:
        self.theme_id = theme_id

    def trimmed(self, max_messages: int, max_files: int) -> "ChatSession":
        """Copy keeping only the newest messages and files, not marked loading."""
        return self.model_copy(
            update={
                "messages": self.messages[-max_messages:],
                "uploaded_files": self.uploaded_files[-max_files:],
                "is_loading": False,
            },
            deep=True,
        )
