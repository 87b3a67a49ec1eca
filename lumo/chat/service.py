"""
Chat Service

Stateless proxy to the chat-completion endpoint plus the session send flow.
Provider failures are classified into user-facing messages with an HTTP
status so the API and CLI report them the same way.
"""

import logging
import time
from collections.abc import AsyncIterator, Sequence

from pydantic import BaseModel, Field

from lumo.chat.context import build_messages
from lumo.llm import BaseLLMProvider, LLMRequest, LLMUsage
from lumo.models.chat import FileContext, Message
from lumo.personas import get_persona
from lumo.prompts import PromptLoader
from lumo.sessions.models import ChatSession

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = (
    "I apologize, but I encountered an error while processing your request. Please try again."
)
RATE_LIMIT_MESSAGE = "I'm currently experiencing high usage. Please wait a moment and try again."
TOO_LARGE_MESSAGE = "Your message is too long. Please try with a shorter message or smaller file."
NOT_CONFIGURED_MESSAGE = "LLM provider is not configured"


class ChatServiceError(Exception):
    """Chat request failed; message is safe to show, detail is the raw cause."""

    def __init__(self, message: str, status_code: int = 500, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail or message


class ChatReply(BaseModel):
    """Assistant reply from the chat proxy."""

    response: str = Field(..., description="Assistant reply text")
    provider: str = Field(..., description="Provider that answered")
    model: str = Field(..., description="Model that answered")
    usage: LLMUsage | None = Field(default=None, description="Token usage")
    latency_ms: float = Field(default=0.0, description="Provider round-trip time in ms")


def classify_error(error: Exception) -> ChatServiceError:
    """Map a provider exception to a ChatServiceError."""
    if isinstance(error, ChatServiceError):
        return error
    text = str(error)
    lowered = text.lower()
    status = getattr(error, "status_code", None)
    if status == 429 or "429" in text or "quota" in lowered or "rate limit" in lowered:
        return ChatServiceError(RATE_LIMIT_MESSAGE, 429, detail=text)
    if status == 413 or "token" in lowered or "too large" in lowered:
        return ChatServiceError(TOO_LARGE_MESSAGE, 413, detail=text)
    return ChatServiceError(APOLOGY_MESSAGE, 500, detail=text or type(error).__name__)


class ChatService:
    """Answer chat messages through the configured LLM provider."""

    def __init__(
        self,
        provider: BaseLLMProvider | None,
        history_limit: int = 10,
        max_file_chars: int = 2000,
        prompts: PromptLoader | None = None,
    ) -> None:
        self.provider = provider
        self.history_limit = history_limit
        self.max_file_chars = max_file_chars
        self.prompts = prompts or PromptLoader()

    def _request(
        self,
        message: str,
        history: Sequence[Message],
        files: Sequence[FileContext],
        persona_id: str | None,
    ) -> LLMRequest:
        if not message or not message.strip():
            raise ChatServiceError("Message is required", 400)
        if self.provider is None:
            raise ChatServiceError(NOT_CONFIGURED_MESSAGE, 500)
        persona = get_persona(persona_id)
        messages = build_messages(
            message,
            history,
            files,
            persona,
            history_limit=self.history_limit,
            max_file_chars=self.max_file_chars,
            prompts=self.prompts,
        )
        return LLMRequest(messages=messages)

    async def reply(
        self,
        message: str,
        history: Sequence[Message] = (),
        files: Sequence[FileContext] = (),
        persona_id: str | None = None,
    ) -> ChatReply:
        """
        Send one message with its context and return the assistant reply.

        Raises:
            ChatServiceError: On validation or provider failure
        """
        request = self._request(message, history, files, persona_id)
        start = time.perf_counter()
        try:
            response = await self.provider.generate(request)
        except Exception as e:
            logger.error(f"Chat request failed: {e}", exc_info=True)
            raise classify_error(e) from e

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Chat reply generated",
            extra={
                "provider": response.provider,
                "persona": persona_id,
                "history": len(history),
                "files": len(files),
                "latency_ms": latency_ms,
            },
        )
        return ChatReply(
            response=response.content,
            provider=response.provider,
            model=response.model,
            usage=response.usage,
            latency_ms=latency_ms,
        )

    async def stream_reply(
        self,
        message: str,
        history: Sequence[Message] = (),
        files: Sequence[FileContext] = (),
        persona_id: str | None = None,
    ) -> AsyncIterator[str]:
        """Yield reply text chunks as the provider streams them."""
        request = self._request(message, history, files, persona_id)
        try:
            async for chunk in self.provider.stream(request):
                if chunk.content:
                    yield chunk.content
        except Exception as e:
            logger.error(f"Chat stream failed: {e}", exc_info=True)
            raise classify_error(e) from e

    async def send_message(self, session: ChatSession, content: str) -> Message:
        """
        Run one turn on a session.

        Appends the user message, asks the provider with the session's
        history, files and persona, then appends the reply. On failure the
        raw error is recorded on the session and the apology is appended.
        """
        if not content or not content.strip():
            raise ChatServiceError("Message is required", 400)

        session.add_message("user", content)
        session.is_loading = True
        session.error = None
        try:
            reply = await self.reply(
                content,
                history=session.messages,
                files=session.uploaded_files,
                persona_id=session.persona_id,
            )
            return session.add_message("assistant", reply.response)
        except ChatServiceError as e:
            session.error = e.detail
            logger.warning(
                "Chat turn failed",
                extra={"session_id": session.session_id, "status_code": e.status_code},
            )
            return session.add_message("assistant", APOLOGY_MESSAGE)
        finally:
            session.is_loading = False
