"""FastAPI application exposing the chat assistant as a REST API."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel

from site_rag.chat.models import ChatMessage
from site_rag.chat.service import ChatService

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site RAG Chat API",
    version="0.1.0",
    description="Question answering over the ingested site pages.",
)


# ── Request schema ────────────────────────────────────────────────────
class ChatRequest(BaseModel):
    """Conversation so far; the last message is the question."""

    messages: list[ChatMessage] = []


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    """Build the chat service once per process."""
    return ChatService()


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}


@app.post("/chat")
def chat(request: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """Answer the latest message, as plain text or a text stream."""
    if not request.messages:
        return JSONResponse({"error": "No messages provided"}, status_code=400)

    try:
        answer = service.answer(request.messages)
    except Exception as exc:
        logger.exception("Chat error")
        return JSONResponse(
            {"error": "Failed to process request", "details": str(exc)},
            status_code=500,
        )

    if answer.is_streaming:
        return StreamingResponse(answer.iter_text(), media_type="text/plain")
    return PlainTextResponse(answer.text or "")
