"""
Contact form delivery.

Sends contact submissions over SMTP when configured and otherwise hands the
client a prebuilt mailto: link.
"""

import asyncio
import html
import logging
import re
import smtplib
import ssl
from datetime import datetime
from email.message import EmailMessage
from urllib.parse import quote

from pydantic import BaseModel, Field

from lumo.config import EmailSettings

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_SUBJECT = "New Contact Form Submission from Lumo.AI"


class ContactValidationError(ValueError):
    """Submission is missing fields or has a malformed address."""

    pass


class ContactSubmission(BaseModel):
    name: str = Field(default="", description="Sender name")
    email: str = Field(default="", description="Sender address (used as reply-to)")
    subject: str | None = Field(default=None, description="Optional subject")
    message: str = Field(default="", description="Message body")


class ContactResult(BaseModel):
    success: bool
    message: str
    fallback_to_mailto: bool = False
    mailto_url: str | None = None
    error: str | None = None


def validate_submission(submission: ContactSubmission) -> None:
    if not submission.name.strip() or not submission.email.strip() or not submission.message.strip():
        raise ContactValidationError("Name, email, and message are required")
    if not EMAIL_PATTERN.fullmatch(submission.email):
        raise ContactValidationError("Invalid email format")
    if submission.subject and ("\r" in submission.subject or "\n" in submission.subject):
        raise ContactValidationError("Subject must be a single line")


def build_mailto(submission: ContactSubmission, recipient: str) -> str:
    subject = submission.subject or DEFAULT_SUBJECT
    body = f"Name: {submission.name}\nEmail: {submission.email}\n\n{submission.message}"
    return f"mailto:{recipient}?subject={quote(subject)}&body={quote(body)}"


def build_message(submission: ContactSubmission, settings: EmailSettings) -> EmailMessage:
    subject = submission.subject or DEFAULT_SUBJECT
    sent_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    message_html = html.escape(submission.message).replace("\n", "<br>")

    msg = EmailMessage()
    msg["From"] = f'"Lumo.AI Contact Form" <{settings.user}>'
    msg["To"] = settings.contact_address
    msg["Reply-To"] = submission.email
    msg["Subject"] = f"[Lumo.AI] {subject}"
    msg.set_content(
        "New Contact Form Submission\n\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Subject: {subject}\n\n"
        f"Message:\n{submission.message}\n\n"
        f"Sent from Lumo.AI contact form at {sent_at}\n"
    )
    msg.add_alternative(
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {html.escape(submission.name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(submission.email)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(subject)}</p>"
        f"<h3>Message:</h3><div>{message_html}</div>"
        "<p style=\"color: #666; font-size: 12px;\">This email was sent from the Lumo.AI "
        f"contact form.<br>Timestamp: {sent_at}</p>"
        "</div>",
        subtype="html",
    )
    return msg


def _send(msg: EmailMessage, settings: EmailSettings) -> None:
    context = ssl.create_default_context()
    if settings.secure:
        with smtplib.SMTP_SSL(settings.host, settings.port, context=context, timeout=30) as smtp:
            smtp.login(settings.user, settings.password)
            smtp.send_message(msg)
        return
    with smtplib.SMTP(settings.host, settings.port, timeout=30) as smtp:
        smtp.starttls(context=context)
        smtp.login(settings.user, settings.password)
        smtp.send_message(msg)


async def send_contact_message(
    submission: ContactSubmission, settings: EmailSettings
) -> ContactResult:
    """
    Deliver a contact submission.

    Raises:
        ContactValidationError: If required fields are missing or the email is malformed
    """
    validate_submission(submission)
    mailto_url = build_mailto(submission, settings.contact_address)

    if not settings.is_configured:
        logger.info("Email service not configured; returning mailto fallback")
        return ContactResult(
            success=False,
            fallback_to_mailto=True,
            mailto_url=mailto_url,
            message="Email service not configured. Using mailto fallback.",
        )

    try:
        await asyncio.to_thread(_send, build_message(submission, settings), settings)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending contact email: {e}")
        return ContactResult(
            success=False,
            fallback_to_mailto=True,
            mailto_url=mailto_url,
            error="Failed to send email. Please try again or contact directly.",
            message="Email service temporarily unavailable. Using mailto fallback.",
        )

    logger.info("Contact email sent", extra={"reply_to": submission.email})
    return ContactResult(success=True, message="Email sent successfully!")
