"""Assistant client: questions about the port area to a hosted language model.

Stateless request/response wrapper around the generative-language REST API
(generateContent). The caller keeps the conversation history and sends it
with each message. Search grounding is enabled, so replies may carry
citations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import httpx
from loguru import logger

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-flash-preview"

SYSTEM_INSTRUCTION = """\
Você é um assistente especialista em geografia socioeconômica e portuária, focado especificamente no complexo do Porto do Itaqui e suas comunidades vizinhas (como Vila Maranhão).
Seu objetivo é fornecer análises sobre:
1. A Poligonal do Porto: Limites, operações e gestão da EMAP.
2. Relação Porto-Comunidade: Impactos na Vila Maranhão, projetos sociais, emprego e renda.
3. Questões Ambientais: Preservação dos manguezais, monitoramento de qualidade do ar e água.
4. Logística: Importância do corredor de exportação (ferrovia e rodovia).

Ao responder, use tom profissional, educativo e focado em desenvolvimento sustentável.
"""


class AssistantError(Exception):
    """The model answered, but the reply had no usable candidate."""


@dataclass
class ChatMessage:
    """One turn of the conversation. role is "user" or "model"."""

    role: str
    text: str


@dataclass
class Citation:
    uri: str
    title: str = ""


@dataclass
class AssistantReply:
    text: str
    grounding: list[Citation] = field(default_factory=list)


class AssistantClient:
    """Client for the hosted model, bound to the port-area system prompt."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        system_instruction: str = SYSTEM_INSTRUCTION,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.system_instruction = system_instruction

    def build_request(self, message: str, history: Sequence[ChatMessage] = ()) -> dict:
        """Build the generateContent request body."""
        contents = [
            {"role": turn.role, "parts": [{"text": turn.text}]} for turn in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})
        return {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": contents,
            "tools": [{"google_search": {}}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
        }

    async def send_message(
        self, message: str, history: Sequence[ChatMessage] = ()
    ) -> AssistantReply:
        """Send a message with the prior conversation.

        Args:
            message: The user's new question.
            history: Earlier turns, oldest first.

        Returns:
            The reply text and any grounding citations.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
            AssistantError: If the response holds no candidate.
        """
        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = self.build_request(message, history)

        async with httpx.AsyncClient() as client:
            try:
                resp = await client.post(
                    url,
                    json=body,
                    headers={"x-goog-api-key": self.api_key},
                    timeout=self.timeout,
                )
                resp.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Assistant request failed: {e}")
                raise

        return parse_reply(resp.json())


def parse_reply(payload: dict) -> AssistantReply:
    """Extract text and grounding citations from a generateContent response."""
    candidates = payload.get("candidates") or []
    if not candidates:
        logger.error(f"Assistant returned no candidates: {payload.get('promptFeedback')}")
        raise AssistantError("The model returned no answer")

    candidate = candidates[0]
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    grounding = []
    chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if web and web.get("uri"):
            grounding.append(Citation(uri=web["uri"], title=web.get("title", "")))

    return AssistantReply(text=text, grounding=grounding)
