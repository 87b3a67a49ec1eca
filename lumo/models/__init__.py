"""
Lumo Models Module

Pydantic models shared across the application.

Available Models:
    Chat Models:
        - Message: One chat message
        - FileContext: Uploaded file kept as model context

    API Models:
        - ChatRequest / ChatResponse: Chat proxy
        - FileUploadResponse: Processed upload
        - HealthResponse: Health check response
"""

from lumo.models.chat import FileContext, Message, utc_now_iso

__all__ = ["FileContext", "Message", "utc_now_iso"]
