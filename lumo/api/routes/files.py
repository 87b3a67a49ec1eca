"""
File Routes

Upload a document, spreadsheet, text or image file for analysis.
"""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from lumo.files import (
    FileTooLargeError,
    UnsupportedFileTypeError,
    format_file_for_chat,
)
from lumo.models.api import FileUploadResponse
from lumo.models.chat import FileContext

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/files", response_model=FileUploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    session_id: str | None = Form(default=None),
) -> FileUploadResponse:
    """
    Extract an uploaded file and build the chat prompt for it.

    When session_id is given the file is also attached to that session as
    context for later messages.

    Raises:
        HTTPException: 413 when too large, 415 when the type is unsupported
    """
    from lumo.api.main import app_state

    file_service = app_state.get("file_service")
    if file_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="File service not initialized",
        )

    file_name = file.filename or "upload"
    data = await file.read()
    try:
        result = await file_service.process_file(file_name, file.content_type, data)
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e),
        ) from e
    except UnsupportedFileTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(e),
        ) from e

    if session_id:
        store = app_state["session_store"]
        session = store.get_or_create(session_id)
        session.add_file_context(
            FileContext(
                file_name=result.file_name,
                file_type=result.file_type,
                content=result.content,
                base64=result.base64,
            )
        )
        store.save(session)
        logger.info(
            "File attached to session",
            extra={"session_id": session_id, "file_name": result.file_name},
        )

    return FileUploadResponse(
        file_name=result.file_name,
        file_type=result.file_type,
        file_size=result.file_size,
        kind=result.kind.value,
        content=result.content,
        base64=result.base64,
        chat_prompt=format_file_for_chat(result),
        session_id=session_id,
    )
