"""Routes for saved conversation records."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from lumo.conversations import (
    Conversation,
    ConversationNotFoundError,
    ConversationStore,
    ConversationSummary,
    export_filename,
)
from lumo.conversations.formatting import MEDIA_TYPES
from lumo.models.api import (
    ConversationCreateRequest,
    ConversationUpdateRequest,
    DeleteResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_conversation_store() -> ConversationStore:
    from lumo.api.main import app_state

    store = app_state.get("conversation_store")
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Conversation store not initialized",
        )
    return store


@router.get("/conversations", response_model=list[ConversationSummary])
async def list_conversations(q: str | None = None) -> list[ConversationSummary]:
    """List saved conversations most-recent-first, optionally filtered by q."""
    store = _get_conversation_store()
    if q:
        return store.search(q)
    return store.list_summaries()


@router.post(
    "/conversations",
    response_model=Conversation,
    status_code=status.HTTP_201_CREATED,
)
async def save_conversation(payload: ConversationCreateRequest) -> Conversation:
    return _get_conversation_store().save_conversation(payload.messages, title=payload.title)


@router.get("/conversations/{conversation_id}", response_model=Conversation)
async def get_conversation(conversation_id: str) -> Conversation:
    conversation = _get_conversation_store().get_conversation(conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    return conversation


@router.put("/conversations/{conversation_id}", response_model=Conversation)
async def update_conversation(
    conversation_id: str, payload: ConversationUpdateRequest
) -> Conversation:
    updated = _get_conversation_store().update_conversation(
        conversation_id, payload.messages, title=payload.title
    )
    if updated is None:
        raise ConversationNotFoundError(conversation_id)
    return updated


@router.delete("/conversations/{conversation_id}", response_model=DeleteResponse)
async def delete_conversation(conversation_id: str) -> DeleteResponse:
    deleted = _get_conversation_store().delete_conversation(conversation_id)
    return DeleteResponse(deleted=deleted)


@router.get("/conversations/{conversation_id}/export")
async def export_conversation(
    conversation_id: str, format: Literal["json", "txt", "md"] = "txt"
) -> Response:
    """Download one conversation as JSON, plain text or Markdown."""
    store = _get_conversation_store()
    conversation = store.get_conversation(conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    body = store.export_conversation(conversation_id, format)
    filename = export_filename(conversation.title, format)
    logger.info(
        "Conversation exported",
        extra={"conversation_id": conversation_id, "format": format},
    )
    return Response(
        content=body,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
