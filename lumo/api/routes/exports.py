"""
Export Routes

Download an assistant response as a document.
"""

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from lumo.exports import ExportError, detect_content_type, render
from lumo.models.api import (
    ExportRequest,
    ExportSuggestionsRequest,
    ExportSuggestionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/exports")
async def export_response(request: ExportRequest) -> Response:
    """
    Render the response text as PDF, Word, Excel, text or Markdown.

    Raises:
        HTTPException: 500 if document generation fails
    """
    try:
        document = render(request.content, request.format, filename=request.filename)
    except ExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        ) from e

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.post("/exports/suggestions", response_model=ExportSuggestionsResponse)
async def export_suggestions(request: ExportSuggestionsRequest) -> ExportSuggestionsResponse:
    """Suggest export formats that suit the response content."""
    return ExportSuggestionsResponse(formats=detect_content_type(request.content))
