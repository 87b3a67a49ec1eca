"""Contact form route."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from lumo.config import get_settings
from lumo.contact import (
    ContactResult,
    ContactSubmission,
    ContactValidationError,
    send_contact_message,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", response_model=ContactResult)
async def contact(submission: ContactSubmission) -> ContactResult | JSONResponse:
    """
    Send a contact form submission by email.

    When SMTP is not configured (or sending fails) the response carries a
    mailto: URL the client can open instead.
    """
    try:
        return await send_contact_message(submission, get_settings().email)
    except ContactValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e)},
        )
