"""
Session Routes

Per-client chat state: messages, attached files and preferences.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from lumo import themes
from lumo.models.api import (
    DeleteResponse,
    EditMessageRequest,
    PreferencesRequest,
    SendMessageRequest,
    SendMessageResponse,
)
from lumo.models.chat import Message
from lumo.personas import list_personas
from lumo.sessions import ChatSession, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_session_store() -> SessionStore:
    from lumo.api.main import app_state

    store = app_state.get("session_store")
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session store not initialized",
        )
    return store


@router.get("/sessions/{session_id}", response_model=ChatSession)
async def get_session(session_id: str) -> ChatSession:
    """Return the stored session, or a fresh one for a new client."""
    return _get_session_store().get_or_create(session_id)


@router.delete("/sessions/{session_id}", response_model=DeleteResponse)
async def delete_session(session_id: str) -> DeleteResponse:
    return DeleteResponse(deleted=_get_session_store().delete(session_id))


@router.post("/sessions/{session_id}/messages", response_model=SendMessageResponse)
async def send_message(session_id: str, request: SendMessageRequest) -> SendMessageResponse:
    """
    Run one chat turn on the session.

    Provider failures do not fail the request: the apology is appended as
    the assistant reply and the raw cause is returned in `error`.
    """
    from lumo.api.main import get_chat_service

    if not request.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is required",
        )

    store = _get_session_store()
    session = store.get_or_create(session_id)
    reply = await get_chat_service().send_message(session, request.content)
    store.save(session)
    return SendMessageResponse(message=reply, error=session.error)


@router.delete("/sessions/{session_id}/messages", response_model=ChatSession)
async def clear_messages(session_id: str) -> ChatSession:
    store = _get_session_store()
    session = store.get_or_create(session_id)
    session.clear_messages()
    return store.save(session)


@router.patch("/sessions/{session_id}/messages/{message_id}", response_model=Message)
async def edit_message(
    session_id: str, message_id: str, request: EditMessageRequest
) -> Message:
    store = _get_session_store()
    session = store.get_or_create(session_id)
    message = session.edit_message(message_id, request.content)
    if message is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Message not found: {message_id}",
        )
    store.save(session)
    return message


@router.delete(
    "/sessions/{session_id}/messages/{message_id}", response_model=DeleteResponse
)
async def delete_message(session_id: str, message_id: str) -> DeleteResponse:
    store = _get_session_store()
    session = store.get_or_create(session_id)
    deleted = session.delete_message(message_id)
    if deleted:
        store.save(session)
    return DeleteResponse(deleted=deleted)


@router.delete("/sessions/{session_id}/files", response_model=ChatSession)
async def clear_files(session_id: str) -> ChatSession:
    store = _get_session_store()
    session = store.get_or_create(session_id)
    session.clear_file_context()
    return store.save(session)


@router.put("/sessions/{session_id}/preferences", response_model=ChatSession)
async def update_preferences(session_id: str, request: PreferencesRequest) -> ChatSession:
    """
    Update language, persona and theme.

    Raises:
        HTTPException: 400 for an unknown persona or theme
    """
    store = _get_session_store()
    session = store.get_or_create(session_id)

    if request.persona_id is not None:
        if request.persona_id not in {persona.id for persona in list_personas()}:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown persona: {request.persona_id}",
            )
        session.set_persona(request.persona_id)
    if request.theme_id is not None:
        if themes.get_theme(request.theme_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown theme: {request.theme_id}",
            )
        session.set_theme(request.theme_id)
    if request.language is not None:
        session.set_language(request.language)

    logger.info(
        "Session preferences updated",
        extra={
            "session_id": session_id,
            "persona": session.persona_id,
            "theme": session.theme_id,
            "language": session.language,
        },
    )
    return store.save(session)
