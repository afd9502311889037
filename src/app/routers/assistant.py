"""Assistant chat endpoint: forwards questions to the hosted model."""

from __future__ import annotations

from typing import Literal

import httpx
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.config import settings
from portmap.assistant import AssistantClient, AssistantError, ChatMessage

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    message: str
    history: list[ChatTurn] = []


class CitationOut(BaseModel):
    uri: str
    title: str = ""


class ChatResponse(BaseModel):
    text: str
    grounding: list[CitationOut] = []


def get_assistant() -> AssistantClient:
    if not settings.gemini_api_key:
        raise HTTPException(status_code=503, detail="Assistant is not configured")
    return AssistantClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.gemini_timeout,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest):
    """Send a message plus prior turns; return the reply and citations."""
    message = body.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    client = get_assistant()
    history = [ChatMessage(role=turn.role, text=turn.text) for turn in body.history]
    try:
        reply = await client.send_message(message, history)
    except (httpx.HTTPError, AssistantError) as e:
        raise HTTPException(status_code=502, detail=f"Assistant unavailable: {e}")

    return ChatResponse(
        text=reply.text,
        grounding=[CitationOut(uri=c.uri, title=c.title) for c in reply.grounding],
    )
