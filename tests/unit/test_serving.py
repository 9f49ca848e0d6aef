"""Unit tests for the serving layer."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from site_rag.chat.models import ChatAnswer
from site_rag.serving.app import app, get_chat_service


@pytest.fixture()
def service() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def client(service: MagicMock):
    app.dependency_overrides[get_chat_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_endpoint() -> None:
    """GET /health should return 200 with status ok."""
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chat_plain_answer(client: TestClient, service: MagicMock) -> None:
    service.answer.return_value = ChatAnswer(text="Hello there.")
    response = client.post("/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

    assert response.status_code == 200
    assert response.text == "Hello there."
    assert response.headers["content-type"].startswith("text/plain")
    sent = service.answer.call_args.args[0]
    assert sent[0].content == "Hi"


def test_chat_streamed_answer(client: TestClient, service: MagicMock) -> None:
    service.answer.return_value = ChatAnswer(stream=iter(["There are ", "20 departments."]))
    response = client.post("/chat", json={"messages": [{"role": "user", "content": "How many?"}]})

    assert response.status_code == 200
    assert response.text == "There are 20 departments."
    assert response.headers["content-type"].startswith("text/plain")


def test_chat_without_messages_is_400(client: TestClient, service: MagicMock) -> None:
    response = client.post("/chat", json={"messages": []})
    assert response.status_code == 400
    assert response.json() == {"error": "No messages provided"}
    service.answer.assert_not_called()


def test_chat_failure_is_500(client: TestClient, service: MagicMock) -> None:
    service.answer.side_effect = RuntimeError("model unavailable")
    response = client.post("/chat", json={"messages": [{"role": "user", "content": "Hi"}]})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process request", "details": "model unavailable"}
