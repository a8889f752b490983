from __future__ import annotations

import types

import httpx

from policy_assistant.base.errors import (
    AnchorNotFound,
    AssistantError,
    ErrorCode,
    MalformedDocument,
    MalformedFrame,
    TransportFailure,
    classify_exception,
    status_to_code,
)


def test_classify_assistant_error_passthrough():
    e = AssistantError(code=ErrorCode.BUSY, message="busy", component="chat")
    assert classify_exception(e) is ErrorCode.BUSY  # nosec B101 - assert is appropriate in unit tests


def test_classify_timeouts():
    assert classify_exception(TimeoutError("x")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101


def test_classify_http_status_mapping():
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101


def test_status_to_code_fallbacks():
    assert status_to_code(418) is ErrorCode.VALIDATION  # nosec B101
    assert status_to_code(520) is ErrorCode.SERVER_ERROR  # nosec B101
    assert status_to_code(302) is ErrorCode.UNKNOWN  # nosec B101


def test_classify_transport_and_heuristics():
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101
    assert classify_exception(Exception("Invalid API key")) is ErrorCode.AUTH  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101


def test_error_kinds_carry_codes_and_details():
    assert TransportFailure("x").code is ErrorCode.TRANSPORT  # nosec B101
    assert TransportFailure("x", code=ErrorCode.AUTH, status=401).status == 401  # nosec B101
    assert MalformedFrame("bad", frame="{").frame == "{"  # nosec B101
    anchor = AnchorNotFound("bad", 7)
    assert anchor.code is ErrorCode.ANCHOR_NOT_FOUND and anchor.start_offset == 7  # nosec B101
    doc = MalformedDocument("mismatched tag", offset=12)
    assert doc.code is ErrorCode.MALFORMED_DOCUMENT and doc.offset == 12  # nosec B101
    assert isinstance(doc, AssistantError) and doc.component == "validation"  # nosec B101
