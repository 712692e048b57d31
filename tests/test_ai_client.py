from contextlib import asynccontextmanager
from datetime import date
from types import SimpleNamespace

import httpx
import pytest

from app.AIsystem.ai_client import (
    NO_RESPONSE_TEXT,
    AIServiceClient,
    build_patient_context,
    service_apology,
)

PATIENT = SimpleNamespace(
    name="Tom",
    email=None,
    phone="555",
    date_of_birth=date(2000, 1, 2),
    medical_notes=None,
)


@asynccontextmanager
async def ai_client(handler, base_url="http://ai.test/", timeout=30.0):
    """AIServiceClient over a mock transport; the http client is closed on exit."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        yield AIServiceClient(http_client, enabled=True, base_url=base_url, timeout=timeout)


def test_patient_context_serializes_date():
    assert build_patient_context(PATIENT) == {
        "name": "Tom",
        "email": None,
        "phone": "555",
        "date_of_birth": "2000-01-02",
        "medical_notes": None,
    }


@pytest.mark.anyio
async def test_trailing_slash_in_base_url_is_ignored():
    async with ai_client(lambda request: httpx.Response(200, json={})) as client:
        assert client.generate_url == "http://ai.test/generate"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "body, expected",
    [
        ({"response": "from response"}, "from response"),
        ({"message": "from message"}, "from message"),
        ({"response": "", "message": "second choice"}, "second choice"),
        ({}, NO_RESPONSE_TEXT),
    ],
)
async def test_reply_text_extraction(body, expected):
    async with ai_client(lambda request: httpx.Response(200, json=body)) as client:
        reply = await client.generate_reply("hello", PATIENT)
    assert reply.delivered is True
    assert reply.text == expected
    assert reply.fallback_reason is None


@pytest.mark.anyio
@pytest.mark.parametrize(
    "handler, reason",
    [
        (lambda request: httpx.Response(500), "bad_status"),
        (lambda request: httpx.Response(200, text="not json"), "bad_payload"),
        (lambda request: httpx.Response(200, json=["a", "list"]), "bad_payload"),
        (lambda request: httpx.Response(200, json={"response": 42}), "bad_payload"),
        (lambda request: httpx.Response(200, json={"response": {"text": "hi"}}), "bad_payload"),
        (lambda request: httpx.Response(200, json={"message": ["hi"]}), "bad_payload"),
    ],
)
async def test_failures_fall_back_to_apology(handler, reason):
    async with ai_client(handler) as client:
        reply = await client.generate_reply("hello", PATIENT)
    assert reply.delivered is False
    assert reply.fallback_reason == reason
    assert reply.text == service_apology("Tom")


@pytest.mark.anyio
async def test_connection_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with ai_client(handler) as client:
        reply = await client.generate_reply("hello", PATIENT)
    assert reply.fallback_reason == "transport_error"
    assert "Tom" in reply.text


@pytest.mark.anyio
async def test_timeout_is_passed_to_request():
    seen = {}

    def handler(request):
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={"response": "ok"})

    async with ai_client(handler, base_url="http://ai.test", timeout=30.0) as client:
        await client.generate_reply("hello", PATIENT)
    assert seen["timeout"]["read"] == 30.0
