"""FastAPI application exposing validation, chat streaming and suggestions.

Endpoints
---------
- ``GET /api/health``
- ``GET /api/snippets``: the policy catalog used for completions
- ``POST /api/validate``: ``{ok, diagnostics}`` for a document
- ``POST /api/chat/stream``: NDJSON chat events, one JSON object per line
- ``POST /api/suggest``: completion items for a cursor position
- ``GET``/``POST /api/settings``: saved endpoint URL and (masked) key

The transport, request builder and store are FastAPI dependencies so tests
can replace them through ``app.dependency_overrides``.

Chat stream shape
-----------------
Each line is ``ChatStreamEvent.to_dict()``: ``type`` is ``delta``, ``final``
or ``error`` and exactly one line has ``finish`` set. A client disconnect
closes the generator, which cancels the turn.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from policy_assistant import __version__
from policy_assistant.assistant import ChatSession, CodeSuggester, CompletionRequestBuilder, CompletionTransport
from policy_assistant.base.errors import AssistantError, ErrorCode
from policy_assistant.base.logging import LogContext, get_logger, log_event
from policy_assistant.catalog import POLICY_SNIPPETS
from policy_assistant.config import AssistantSettings, get_settings
from policy_assistant.persistence import KeyValueStore, save_settings
from policy_assistant.validation import AttributeValidator

from .app_parts.app_core import (
    ChatBody,
    SettingsBody,
    SuggestBody,
    ValidateBody,
    get_builder_dep,
    get_settings_dep,
    get_store_dep,
    get_transport_dep,
    mask_key,
    resolve_endpoint,
)

logger = get_logger("policy_assistant.service")

app = FastAPI(title="Policy Assistant Service", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "version": __version__}


@app.get("/api/snippets")
def get_snippets() -> Dict[str, Any]:
    """List the policy catalog (labels, documentation and insert text)."""
    return {
        "ok": True,
        "snippets": [
            {
                "label": s.label,
                "documentation": s.documentation,
                "insertText": s.insert_text,
                "attributes": list(s.attributes),
            }
            for s in POLICY_SNIPPETS
        ],
    }


@app.post("/api/validate")
def post_validate(body: ValidateBody) -> Dict[str, Any]:
    """Validate a document; an invalid schema is a 400."""
    try:
        validator = AttributeValidator(body.schema_)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    diagnostics = validator.validate(body.document, sort=body.sort)
    return {"ok": not diagnostics, "diagnostics": [d.to_dict() for d in diagnostics]}


@app.post("/api/chat/stream")
def post_chat_stream(
    body: ChatBody,
    transport: CompletionTransport = Depends(get_transport_dep),
    builder: CompletionRequestBuilder = Depends(get_builder_dep),
) -> StreamingResponse:
    """Stream one chat turn as NDJSON events.

    An empty message is a 400. Failures after the stream started arrive as a
    final ``type="error"`` line.
    """
    session = ChatSession(transport, builder)
    try:
        turn = session.start_turn(body.message, body.document)
    except AssistantError as e:
        raise HTTPException(status_code=400, detail=e.message) from e

    def iter_ndjson() -> Iterator[bytes]:
        for ev in turn:
            yield (json.dumps(ev.to_dict()) + "\n").encode("utf-8")

    return StreamingResponse(iter_ndjson(), media_type="application/x-ndjson")


@app.post("/api/suggest")
def post_suggest(
    body: SuggestBody,
    transport: CompletionTransport = Depends(get_transport_dep),
    builder: CompletionRequestBuilder = Depends(get_builder_dep),
) -> Dict[str, Any]:
    """Completion items for the cursor; endpoint failures yield no items."""
    suggester = CodeSuggester(transport, builder)
    try:
        items = suggester.provide_completion_items(body.document, body.line, body.column)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    error = suggester.last_error
    return {
        "ok": error is None,
        "suggestions": [item.to_dict() for item in items],
        "error": error.message if error else None,
        "error_code": error.code.value if error else None,
    }


@app.get("/api/settings")
def get_endpoint_settings(
    settings: AssistantSettings = Depends(get_settings_dep),
    store: KeyValueStore = Depends(get_store_dep),
) -> Dict[str, Any]:
    url, key = resolve_endpoint(settings, store)
    return {"ok": True, "api_url": url, "api_key": mask_key(key)}


@app.post("/api/settings")
def post_endpoint_settings(body: SettingsBody, store: KeyValueStore = Depends(get_store_dep)) -> Dict[str, Any]:
    saved = save_settings(store, body.api_url, body.api_key)
    log_event(logger, "settings.saved", LogContext(component="service"), api_url=saved.api_url, has_key=bool(saved.api_key))
    return {"ok": True, "api_url": saved.api_url, "api_key": mask_key(saved.api_key)}


@app.exception_handler(AssistantError)
def _assistant_error_handler(_request: Request, exc: AssistantError) -> JSONResponse:
    status = 409 if exc.code is ErrorCode.BUSY else 502
    return JSONResponse(status_code=status, content={"ok": False, "error": exc.message, "error_code": exc.code.value})


def get_app() -> FastAPI:
    """Return the FastAPI application instance."""
    return app


__all__ = ["app", "get_app"]
