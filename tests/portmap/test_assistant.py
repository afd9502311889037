"""Tests for the assistant client: request body, reply parsing, errors.

All HTTP calls are mocked (no external API calls).
"""

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from portmap.assistant import (
    SYSTEM_INSTRUCTION,
    AssistantClient,
    AssistantError,
    ChatMessage,
    Citation,
    parse_reply,
)

REPLY = {
    "candidates": [{
        "content": {"role": "model", "parts": [{"text": "O Porto do Itaqui "}, {"text": "fica em São Luís."}]},
        "groundingMetadata": {
            "groundingChunks": [
                {"web": {"uri": "https://example.org/itaqui", "title": "Itaqui"}},
                {"retrievedContext": {"uri": "ignored"}},
            ],
        },
    }],
}


def _mock_client(response=None, error=None):
    client = AsyncMock()
    if error is not None:
        client.post = AsyncMock(side_effect=error)
    else:
        client.post = AsyncMock(return_value=response)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


def _response(status, payload):
    request = httpx.Request("POST", "https://example.com")
    return httpx.Response(status, json=payload, request=request)


@pytest.mark.unit
class TestBuildRequest:

    def test_body_shape(self):
        client = AssistantClient(api_key="k")
        body = client.build_request(
            "Onde fica a poligonal?",
            [ChatMessage("user", "Olá"), ChatMessage("model", "Olá! Como posso ajudar?")],
        )
        assert body["systemInstruction"]["parts"][0]["text"] == SYSTEM_INSTRUCTION
        assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
        assert body["contents"][-1]["parts"][0]["text"] == "Onde fica a poligonal?"
        assert body["tools"] == [{"google_search": {}}]
        assert body["generationConfig"]["thinkingConfig"]["thinkingBudget"] == 0

    def test_system_instruction_is_about_the_port(self):
        assert "Porto do Itaqui" in SYSTEM_INSTRUCTION
        assert "Vila Maranhão" in SYSTEM_INSTRUCTION


@pytest.mark.unit
class TestParseReply:

    def test_text_and_grounding(self):
        reply = parse_reply(REPLY)
        assert reply.text == "O Porto do Itaqui fica em São Luís."
        assert reply.grounding == [Citation(uri="https://example.org/itaqui", title="Itaqui")]

    def test_no_grounding(self):
        reply = parse_reply({"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
        assert reply.text == "ok"
        assert reply.grounding == []

    def test_no_candidates_raises(self):
        with pytest.raises(AssistantError):
            parse_reply({"promptFeedback": {"blockReason": "SAFETY"}})


@pytest.mark.unit
class TestSendMessage:

    def test_posts_to_generate_content(self):
        mock_client = _mock_client(_response(200, REPLY))
        client = AssistantClient(api_key="secret", model="m1", base_url="https://api.test/v1beta/")
        with patch("portmap.assistant.httpx.AsyncClient", return_value=mock_client):
            reply = asyncio.run(client.send_message("Olá"))

        assert reply.text.startswith("O Porto do Itaqui")
        args, kwargs = mock_client.post.call_args
        assert args[0] == "https://api.test/v1beta/models/m1:generateContent"
        assert kwargs["headers"] == {"x-goog-api-key": "secret"}
        assert kwargs["json"]["contents"][-1]["parts"][0]["text"] == "Olá"

    def test_http_status_error_propagates(self):
        mock_client = _mock_client(_response(500, {"error": {"message": "boom"}}))
        client = AssistantClient(api_key="k")
        with patch("portmap.assistant.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(httpx.HTTPStatusError):
                asyncio.run(client.send_message("Olá"))

    def test_transport_error_propagates(self):
        mock_client = _mock_client(error=httpx.ConnectError("unreachable"))
        client = AssistantClient(api_key="k")
        with patch("portmap.assistant.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(httpx.ConnectError):
                asyncio.run(client.send_message("Olá"))
