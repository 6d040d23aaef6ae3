"""Tests for the chat HTTP API."""

import json
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from docuchat.api.v1.routes import chat
from docuchat.main import app as main_app

from tests.fakes import BrokenHistoryStore, FakeGateway, PNG_DATA_URL


def sse_payloads(body: str):
    """Data payloads of an SSE body, JSON-decoded except the [DONE] marker."""
    payloads = []
    for event in body.split("\n\n"):
        if not event.startswith("data: "):
            continue
        data = event[len("data: "):]
        payloads.append(data if data == "[DONE]" else json.loads(data))
    return payloads


def chat_body(text: str = "Please translate this", chat_id: str = "chat-1", **extra):
    return {
        "id": chat_id,
        "message": {"id": "msg-user-1", "role": "user", "parts": [{"type": "text", "text": text}]},
        **extra,
    }


@pytest.fixture
def make_client(build_pipeline, history_store):
    """Build a TestClient around the chat router with a fake pipeline."""

    def _make(gateway: FakeGateway, store=None, **pipeline_kwargs) -> TestClient:
        store = store if store is not None else history_store
        app = FastAPI()
        app.include_router(chat.router, prefix="/api/v1")
        app.state.services = SimpleNamespace(
            pipeline=build_pipeline(gateway=gateway, store=store, **pipeline_kwargs),
            history_store=store,
        )
        return TestClient(app)

    return _make


class TestChatEndpoint:
    """Tests for POST /api/v1/chat."""

    def test_streams_sse_events(self, make_client):
        client = make_client(FakeGateway(scripts=[["Hello ", "world"]]), buffer_tokens=2)

        response = client.post("/api/v1/chat", json=chat_body())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

        payloads = sse_payloads(response.text)
        events = [p["type"] for p in payloads[:-1]]
        assert events == ["start", "text-start", "text-delta", "text-delta", "text-end", "finish"]
        assert payloads[-1] == "[DONE]"

        message_id = payloads[0]["messageId"]
        assert all(p["id"] == message_id for p in payloads[1:5])
        assert "".join(p["delta"] for p in payloads if p["type"] == "text-delta") == "Hello world"

    def test_exchange_is_saved_after_response(self, make_client):
        client = make_client(FakeGateway(scripts=[["Hello world"]]))

        client.post("/api/v1/chat", json=chat_body())
        response = client.get("/api/v1/chat/chat-1")

        assert response.status_code == 200
        messages = response.json()["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[0]["id"] == "msg-user-1"
        assert messages[1]["parts"][0]["text"] == "Hello world"

    def test_exhausted_refusal_is_plain_text(self, make_client):
        gateway = FakeGateway(scripts=[["I cannot translate this."]] * 3)
        client = make_client(gateway)

        response = client.post("/api/v1/chat", json=chat_body())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "I cannot translate this."

    def test_exhausted_french_refusal_is_plain_text(self, make_client):
        refusal = "Je ne peux pas traduire ce document"
        gateway = FakeGateway(scripts=[[refusal]] * 3)
        client = make_client(gateway)

        response = client.post("/api/v1/chat", json=chat_body("Traduire ce document"))

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == refusal
        assert len(gateway.chat_calls) == 3

    def test_mid_stream_error_is_an_event(self, make_client):
        gateway = FakeGateway(scripts=[["one two three ", "four ", RuntimeError("connection lost")]])
        client = make_client(gateway, buffer_tokens=2)

        response = client.post("/api/v1/chat", json=chat_body())

        assert response.status_code == 200
        payloads = sse_payloads(response.text)
        events = [p["type"] for p in payloads[:-1]]
        assert events == ["start", "text-start", "text-delta", "text-delta", "error", "text-end", "finish"]
        assert payloads[4]["errorText"] == "connection lost"

    def test_generation_failure_is_500(self, make_client):
        client = make_client(FakeGateway(scripts=[[RuntimeError("provider down")]]))

        response = client.post("/api/v1/chat", json=chat_body())

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "provider down" in response.json()["message"]

    def test_file_parts_are_accepted(self, make_client):
        client = make_client(FakeGateway(scripts=[["Answer"]]))
        body = chat_body()
        body["message"]["parts"].append({"type": "file", "mediaType": "text/plain", "url": PNG_DATA_URL})

        response = client.post("/api/v1/chat", json=body)

        assert response.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"message": {"role": "user", "parts": []}},
            {"id": "chat-1"},
            {"id": "chat-1", "message": {"role": "assistant", "parts": []}},
            {"id": "chat-1", "message": {"role": "user", "parts": [{"type": "video", "url": "x"}]}},
        ],
    )
    def test_invalid_body_is_422(self, make_client, body):
        client = make_client(FakeGateway())

        response = client.post("/api/v1/chat", json=body)

        assert response.status_code == 422


class TestGetChat:
    """Tests for GET /api/v1/chat/{chat_id}."""

    def test_unknown_chat_is_empty(self, make_client):
        response = make_client(FakeGateway()).get("/api/v1/chat/missing")

        assert response.status_code == 200
        assert response.json() == {"messages": []}

    def test_store_failure_is_500(self, make_client):
        response = make_client(FakeGateway(), store=BrokenHistoryStore()).get("/api/v1/chat/chat-1")

        assert response.status_code == 500


class TestHealth:
    def test_health(self):
        # No context manager: the lifespan and its network clients are not started
        response = TestClient(main_app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
