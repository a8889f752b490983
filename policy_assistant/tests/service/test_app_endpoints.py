"""FastAPI service endpoints with the transport and store replaced."""
from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from policy_assistant.config import AssistantSettings
from policy_assistant.persistence import InMemoryKeyValueStore
from policy_assistant.service import app as app_mod
from policy_assistant.service.app_parts.app_core import (
    get_store_dep,
    get_transport_dep,
    mask_key,
    resolve_endpoint,
)
from policy_assistant.tests.helpers import completion_json, failing_stream, make_transport, sse_body, sse_line


@pytest.fixture()
def store():
    return InMemoryKeyValueStore()


@pytest.fixture()
def client_for(store):
    app = app_mod.get_app()

    def _make(handler=None):
        app.dependency_overrides[get_store_dep] = lambda: store
        if handler is not None:
            app.dependency_overrides[get_transport_dep] = lambda: make_transport(handler)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def _ndjson(response):
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


def test_health(client_for):
    response = client_for().get("/api/health")
    assert response.status_code == 200 and response.json()["ok"] is True  # nosec B101


def test_validate_reports_diagnostics(client_for):
    doc = '<policies><inbound><set-header name="X" bad="y"><value>v</value></set-header></inbound></policies>'
    response = client_for().post(
        "/api/validate",
        json={"document": doc, "schema": {"set-header": ["name", "exists-action"]}},
    )
    body = response.json()
    assert response.status_code == 200 and body["ok"] is False  # nosec B101
    assert [d["message"] for d in body["diagnostics"]] == ["Unknown attribute: bad"]  # nosec B101
    assert body["diagnostics"][0]["start_line"] == 1  # nosec B101


def test_validate_default_schema_and_clean_document(client_for):
    response = client_for().post("/api/validate", json={"document": "<policies><inbound /></policies>"})
    assert response.json() == {"ok": True, "diagnostics": []}  # nosec B101


def test_chat_stream_emits_deltas_and_single_final(client_for):
    client = client_for(lambda r: httpx.Response(200, content=sse_body("Hel", "lo").encode()))
    response = client.post("/api/chat/stream", json={"message": "hi", "document": "<p/>"})
    assert response.status_code == 200  # nosec B101
    events = _ndjson(response)
    assert [e["type"] for e in events] == ["delta", "delta", "final"]  # nosec B101
    assert events[-1]["text"] == "Hello" and events[-1]["finish"] is True  # nosec B101
    assert sum(1 for e in events if e["finish"]) == 1  # nosec B101


def test_chat_stream_failure_is_terminal_error_line(client_for):
    chunks = failing_stream([sse_line("par").encode()], httpx.ReadError("reset"))
    client = client_for(lambda r: httpx.Response(200, content=chunks))
    events = _ndjson(client.post("/api/chat/stream", json={"message": "hi"}))
    assert events[-1]["type"] == "error" and events[-1]["text"] == "par"  # nosec B101
    assert events[-1]["error_code"] == "transport"  # nosec B101


def test_chat_stream_rejects_empty_message(client_for):
    client = client_for(lambda r: httpx.Response(200, content=b""))
    assert client.post("/api/chat/stream", json={"message": " "}).status_code == 400  # nosec B101


def test_suggest_returns_completion_items(client_for):
    client = client_for(lambda r: httpx.Response(200, json=completion_json("<set-header />")))
    body = client.post("/api/suggest", json={"document": "<policies>\n  <set", "line": 2, "column": 7}).json()
    assert body["ok"] is True  # nosec B101
    assert body["suggestions"][0]["insertText"] == "<set-header />"  # nosec B101


def test_suggest_endpoint_failure_is_reported(client_for):
    client = client_for(lambda r: httpx.Response(429, json={"error": {"message": "slow down"}}))
    body = client.post("/api/suggest", json={"document": "abcdef", "line": 1, "column": 5}).json()
    assert body["ok"] is False and body["suggestions"] == []  # nosec B101
    assert body["error_code"] == "rate_limit"  # nosec B101


def test_suggest_outside_document_is_400(client_for):
    client = client_for(lambda r: httpx.Response(200, json=completion_json("x")))
    response = client.post("/api/suggest", json={"document": "abc", "line": 5, "column": 1})
    assert response.status_code == 400  # nosec B101


def test_settings_roundtrip_masks_key(client_for, store):
    client = client_for()
    saved = client.post("/api/settings", json={"api_url": "https://gw.example/chat", "api_key": "secret-1234"}).json()
    assert saved["api_url"] == "https://gw.example/chat" and saved["api_key"].endswith("1234")  # nosec B101
    assert "secret" not in saved["api_key"]  # nosec B101
    assert client.get("/api/settings").json()["api_url"] == "https://gw.example/chat"  # nosec B101


def test_resolve_endpoint_prefers_saved_values(store):
    settings = AssistantSettings(api_url="https://config.example/chat", api_key="cfg")
    assert resolve_endpoint(settings, store) == ("https://config.example/chat", "cfg")  # nosec B101
    store.set("apiUrl", "https://saved.example/chat")
    store.set("apiKey", "saved")
    assert resolve_endpoint(settings, store) == ("https://saved.example/chat", "saved")  # nosec B101
    assert mask_key(None) is None and mask_key("ab") == "****ab"  # nosec B101


def test_snippets_listing(client_for):
    body = client_for().get("/api/snippets").json()
    assert any(s["label"] == "set-header" for s in body["snippets"])  # nosec B101
