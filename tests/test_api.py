"""
Tests for the HTTP surface: chat turns, the voice webhook and health.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import app.api.vapi_webhook as vapi_webhook
from app.application.use_cases.handle_voice_event import HandleVoiceEventUseCase
from app.main import app
from app.wiring.dependencies import get_handle_turn_use_case
from tests.support import TZ


@pytest.fixture
def client(handle_turn, answer_question, composer, monkeypatch):
    voice = HandleVoiceEventUseCase(
        handle_turn=handle_turn,
        answer_question=answer_question,
        composer=composer,
        timezone=TZ,
    )
    app.dependency_overrides[get_handle_turn_use_case] = lambda: handle_turn
    monkeypatch.setattr(vapi_webhook, "get_handle_voice_event_use_case", lambda: voice)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chat_requires_an_utterance(client):
    assert client.post("/api/chat", json={}).status_code == 400
    assert client.post("/api/chat", json={"utterance": "   "}).status_code == 400


def test_chat_round_trips_state(client):
    first = client.post("/api/chat", json={"utterance": "I'd like to book a table"})
    assert first.status_code == 200
    body = first.json()
    assert body["intent"] == "booking"
    assert body["newState"]["step"] == "name"

    second = client.post("/api/chat", json={"utterance": "Ana Lopez", "priorState": body["newState"]})
    body = second.json()
    assert body["newState"]["step"] == "email"
    assert body["newState"]["fields"]["name"] == "Ana Lopez"
    assert "Nice to meet you, Ana Lopez" in body["reply"]


def test_chat_uses_last_user_message(client):
    response = client.post(
        "/api/chat",
        json={
            "messages": [
                {"role": "assistant", "content": "Hi! How can I help?"},
                {"role": "user", "content": "Can I reserve a table?"},
            ]
        },
    )
    assert response.status_code == 200
    assert response.json()["intent"] == "booking"


def test_chat_ignores_malformed_state(client):
    response = client.post("/api/chat", json={"utterance": "What are your opening hours?", "priorState": "confirmation"})
    body = response.json()
    assert response.status_code == 200
    assert body["newState"] is None
    assert body["intent"] == "information"
    assert "Opening hours" in body["reply"]


def test_chat_cancel(client):
    state = client.post("/api/chat", json={"utterance": "book a table"}).json()["newState"]
    body = client.post("/api/chat", json={"utterance": "cancel", "priorState": state}).json()
    assert body["intent"] == "cancel"
    assert body["newState"] is None


def test_webhook_requires_message(client):
    response = client.post("/api/vapi/webhook", json={"call": {}})
    assert response.status_code == 400


def test_webhook_rejects_invalid_json(client):
    response = client.post(
        "/api/vapi/webhook",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_webhook_acknowledges_status_updates(client):
    response = client.post("/api/vapi/webhook", json={"message": {"type": "status-update", "status": "ended"}})
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_webhook_function_call(client):
    response = client.post(
        "/api/vapi/webhook",
        json={
            "message": {
                "type": "function-call",
                "functionCall": {"name": "getRestaurantInfo", "parameters": "{\"query\": \"opening hours\"}"},
            }
        },
    )
    assert response.status_code == 200
    assert "Opening hours" in response.json()["result"]
