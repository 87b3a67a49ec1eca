"""
WebSocket Routes

Streaming chat over a WebSocket: reply text arrives as it is generated.
"""

import json
import logging
import time

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from lumo.chat import ChatServiceError
from lumo.models.api import ChatRequest
from lumo.models.chat import Message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/chat")
async def websocket_chat(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for streaming chat replies.

    Event Types:
        - answer_chunk: Streaming answer text
        - complete: Final response with the full text
        - error: Error occurred during processing

    Message Format:
        Client -> Server (same body as POST /api/v1/chat):
        {
            "message": "Explain this spreadsheet",
            "history": [{"role": "user", "content": "..."}],
            "file_context": [...],
            "persona_id": "data-scientist"
        }

        Server -> Client:
        {"event": "answer_chunk", "chunk": "The sheet"}
        {"event": "complete", "response": "The sheet lists...", "latency_ms": 812.4}
        {"event": "error", "error": "rate_limited", "message": "I'm currently ..."}
    """
    from lumo.api.main import app_state

    await websocket.accept()
    logger.info("WebSocket connection established")

    try:
        data = await websocket.receive_json()
        try:
            request = ChatRequest.model_validate(data)
        except ValidationError as e:
            await websocket.send_json(
                {"event": "error", "error": "validation_error", "message": str(e)}
            )
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        if not request.message.strip():
            await websocket.send_json(
                {
                    "event": "error",
                    "error": "validation_error",
                    "message": "Missing required field: message",
                }
            )
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        chat_service = app_state.get("chat_service")
        if chat_service is None or chat_service.provider is None:
            await websocket.send_json(
                {
                    "event": "error",
                    "error": "service_unavailable",
                    "message": "LLM provider is not configured",
                }
            )
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            return

        history = [Message(role=msg.role, content=msg.content) for msg in request.history]
        start = time.perf_counter()
        parts: list[str] = []
        try:
            async for chunk in chat_service.stream_reply(
                request.message,
                history=history,
                files=request.file_context,
                persona_id=request.persona_id,
            ):
                parts.append(chunk)
                await websocket.send_json({"event": "answer_chunk", "chunk": chunk})
        except ChatServiceError as e:
            error_code = {429: "rate_limited", 413: "too_large"}.get(e.status_code, "llm_error")
            await websocket.send_json(
                {
                    "event": "error",
                    "error": error_code,
                    "message": e.message,
                    "details": e.detail,
                }
            )
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            return

        latency_ms = (time.perf_counter() - start) * 1000
        await websocket.send_json(
            {"event": "complete", "response": "".join(parts), "latency_ms": latency_ms}
        )
        logger.info(
            "WebSocket request completed successfully",
            extra={"chunks": len(parts), "latency_ms": latency_ms},
        )
        await websocket.close()

    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON received: {e}")
        try:
            await websocket.send_json(
                {"event": "error", "error": "invalid_json", "message": "Invalid JSON format"}
            )
            await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
        except Exception:
            pass
    except Exception as e:
        logger.error(f"Unexpected error in WebSocket handler: {e}", exc_info=True)
        try:
            await websocket.send_json(
                {
                    "event": "error",
                    "error": "internal_error",
                    "message": f"An unexpected error occurred: {str(e)}",
                }
            )
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except Exception:
            pass
