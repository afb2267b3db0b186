"""Tests for the HTTP endpoints via FastAPI TestClient with the pipeline mocked."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

import config
from main import app
from pagewright.agent import BuildResult
from pagewright.generator import GenerationError
from pagewright.models import ChatMessage, GenerateHtmlRequest
from pagewright.routes import resolve_user_message


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "OPENROUTER_API_KEY", "test-openrouter-key")
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_classify(client):
    response = client.post("/api/classify", json={"instruction": "translate this to Turkish"})
    assert response.status_code == 200
    body = response.json()
    assert body["intent"] == "semantic"
    assert 0 < body["confidence"] <= 0.95


def test_apply_edits(client):
    response = client.post(
        "/api/apply-edits",
        json={
            "html": "<p>Alice</p><p>Alice</p><p>Carol</p>",
            "ops": [
                {"op": "replace", "target": "Alice", "value": "Bob"},
                {"op": "replace", "target": "Carol", "value": "Dave"},
            ],
        },
    )
    assert response.status_code == 200
    assert response.json() == {
        "html": "<p>Alice</p><p>Alice</p><p>Dave</p>",
        "editsApplied": 1,
    }


def test_apply_edits_rejects_unknown_operation(client):
    response = client.post(
        "/api/apply-edits",
        json={"html": "<p>x</p>", "ops": [{"op": "explode", "target": "x"}]},
    )
    assert response.status_code == 422


def test_generate_html_edit(client):
    result = BuildResult(
        html="<html>new</html>",
        mode="edit",
        message="Quick edit complete · 1 changes applied",
        intent="micro",
        confidence=0.75,
        edits_applied=1,
    )
    with patch("pagewright.routes.process_instruction", AsyncMock(return_value=result)) as mocked:
        response = client.post(
            "/api/generate-html",
            json={"currentHtml": "<html>old</html>", "userMessage": "change the title to New"},
        )

    assert response.status_code == 200
    assert response.json() == {
        "html": "<html>new</html>",
        "mode": "edit",
        "intent": "micro",
        "confidence": 0.75,
        "editsApplied": 1,
        "message": "Quick edit complete · 1 changes applied",
    }
    args = mocked.await_args
    assert args.args[0] == "change the title to New"
    assert args.args[1] == "<html>old</html>"


def test_generate_html_without_key(client, monkeypatch):
    monkeypatch.setattr(config, "OPENROUTER_API_KEY", None)
    response = client.post("/api/generate-html", json={"userMessage": "a page"})
    assert response.status_code == 500


def test_generate_html_without_instruction(client):
    response = client.post("/api/generate-html", json={"messages": []})
    assert response.status_code == 400


def test_generate_html_generation_error(client):
    with patch(
        "pagewright.routes.process_instruction",
        AsyncMock(side_effect=GenerationError("no html")),
    ):
        response = client.post("/api/generate-html", json={"userMessage": "a page"})

    assert response.status_code == 500
    assert "no html" in response.json()["detail"]


def test_resolve_user_message_falls_back_to_last_turn():
    request = GenerateHtmlRequest(
        messages=[
            ChatMessage(role="user", content="first"),
            ChatMessage(role="assistant", content="Built"),
            ChatMessage(role="user", content="second"),
        ]
    )
    assert resolve_user_message(request) == ("second", None)


def test_resolve_user_message_json_override():
    request = GenerateHtmlRequest(
        userMessage=json.dumps({"message": "make it blue", "model": "vendor/model"}),
        model="default/model",
    )
    assert resolve_user_message(request) == ("make it blue", "vendor/model")


def test_resolve_user_message_plain_json_value_is_kept():
    request = GenerateHtmlRequest(userMessage="42")
    assert resolve_user_message(request) == ("42", None)
