"""Tests for contact form delivery."""

import smtplib
from unittest.mock import MagicMock, patch
from urllib.parse import unquote

import pytest

from lumo.config import EmailSettings
from lumo.contact import (
    DEFAULT_SUBJECT,
    ContactSubmission,
    ContactValidationError,
    build_mailto,
    build_message,
    send_contact_message,
    validate_submission,
)


@pytest.fixture
def submission():
    return ContactSubmission(
        name="Ada", email="ada@example.com", subject="Hello", message="Line 1\n<b>Line 2</b>"
    )


@pytest.fixture
def smtp_settings():
    return EmailSettings(
        host="smtp.example.com",
        port=587,
        user="bot@example.com",
        password="secret",
        contact_address="support@example.com",
    )


class TestValidation:
    @pytest.mark.parametrize("field", ["name", "email", "message"])
    def test_required_fields(self, submission, field):
        with pytest.raises(ContactValidationError, match="required"):
            validate_submission(submission.model_copy(update={field: "  "}))

    def test_invalid_email(self, submission):
        with pytest.raises(ContactValidationError, match="Invalid email format"):
            validate_submission(submission.model_copy(update={"email": "ada@localhost"}))

    def test_email_with_trailing_newline(self, submission):
        with pytest.raises(ContactValidationError, match="Invalid email format"):
            validate_submission(submission.model_copy(update={"email": "ada@example.com\n"}))

    @pytest.mark.parametrize("subject", ["Hi\nBcc: x@y.z", "Hi\r\nTo: x@y.z"])
    def test_multiline_subject_rejected(self, submission, subject):
        with pytest.raises(ContactValidationError, match="single line"):
            validate_submission(submission.model_copy(update={"subject": subject}))


def test_mailto_link(submission):
    url = build_mailto(submission.model_copy(update={"subject": None}), "support@lumo.ai")

    assert url.startswith("mailto:support@lumo.ai?subject=")
    assert unquote(url.split("subject=")[1].split("&")[0]) == DEFAULT_SUBJECT
    assert "Name: Ada\nEmail: ada@example.com\n\nLine 1" in unquote(url)


def test_message_headers_and_escaped_html(submission, smtp_settings):
    msg = build_message(submission, smtp_settings)

    assert msg["To"] == "support@example.com"
    assert msg["Reply-To"] == "ada@example.com"
    assert msg["Subject"] == "[Lumo.AI] Hello"
    html_part = msg.get_body(preferencelist=("html",)).get_content()
    assert "Line 1<br>&lt;b&gt;Line 2&lt;/b&gt;" in html_part


@pytest.mark.asyncio
async def test_unconfigured_returns_mailto(submission):
    result = await send_contact_message(submission, EmailSettings(host=None, user=None, password=None))

    assert result.success is False
    assert result.fallback_to_mailto is True
    assert result.mailto_url.startswith("mailto:")


@pytest.mark.asyncio
async def test_sends_with_starttls(submission, smtp_settings):
    with patch("lumo.contact.smtplib.SMTP") as mock_smtp:
        smtp = mock_smtp.return_value.__enter__.return_value

        result = await send_contact_message(submission, smtp_settings)

    assert result.success is True
    assert result.message == "Email sent successfully!"
    mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=30)
    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("bot@example.com", "secret")
    smtp.send_message.assert_called_once()


@pytest.mark.asyncio
async def test_secure_uses_smtp_ssl(submission, smtp_settings):
    settings = smtp_settings.model_copy(update={"secure": True, "port": 465})

    with patch("lumo.contact.smtplib.SMTP_SSL") as mock_ssl:
        result = await send_contact_message(submission, settings)

    assert result.success is True
    assert mock_ssl.call_args.args == ("smtp.example.com", 465)


@pytest.mark.asyncio
async def test_smtp_failure_falls_back(submission, smtp_settings):
    with patch("lumo.contact.smtplib.SMTP") as mock_smtp:
        smtp = MagicMock()
        smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        mock_smtp.return_value.__enter__.return_value = smtp

        result = await send_contact_message(submission, smtp_settings)

    assert result.success is False
    assert result.fallback_to_mailto is True
    assert result.error == "Failed to send email. Please try again or contact directly."


@pytest.mark.asyncio
async def test_header_injection_never_reaches_smtp(submission, smtp_settings):
    with patch("lumo.contact.smtplib.SMTP") as mock_smtp:
        with pytest.raises(ContactValidationError):
            await send_contact_message(
                submission.model_copy(update={"subject": "Hi\nBcc: x@y.z"}), smtp_settings
            )

    mock_smtp.assert_not_called()
