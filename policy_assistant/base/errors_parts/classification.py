"""Map HTTP statuses and exceptions onto :class:`ErrorCode`.

The completion transport uses ``status_to_code`` for non-2xx replies and
``classify_exception`` for everything raised while talking to the endpoint.
"""
from __future__ import annotations

from typing import Mapping, Optional, Tuple

import httpx

from .assistant_error import AssistantError
from .error_code import ErrorCode

_STATUS_CODES: Mapping[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# First match wins; "invalid api key" must read as auth, not validation.
_MESSAGE_HINTS: Tuple[Tuple[ErrorCode, Tuple[str, ...]], ...] = (
    (ErrorCode.RATE_LIMIT, ("rate limit", "rate-limit", "too many requests")),
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("api key", "api-key", "unauthorized", "forbidden")),
    (ErrorCode.NOT_FOUND, ("not found", "deployment does not exist")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "connection refused")),
    (ErrorCode.VALIDATION, ("invalid", "malformed")),
)


def status_to_code(status: int) -> ErrorCode:
    """Code for an HTTP status; unmapped 4xx is validation, unmapped 5xx server_error."""
    if status in _STATUS_CODES:
        return _STATUS_CODES[status]
    if 500 <= status < 600:
        return ErrorCode.SERVER_ERROR
    if 400 <= status < 500:
        return ErrorCode.VALIDATION
    return ErrorCode.UNKNOWN


def _status_of(exc: object) -> Optional[int]:
    candidates = (
        getattr(exc, "status_code", None),
        getattr(exc, "status", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    )
    for value in candidates:
        if isinstance(value, int) and 100 <= value < 600:
            return value
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Best-effort :class:`ErrorCode` for ``exc``.

    Checked in order: an ``AssistantError``'s own code, timeouts, an attached
    HTTP status, other ``httpx`` transport errors, then the message text.
    """
    if isinstance(exc, AssistantError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    status = _status_of(exc)
    if status is not None:
        return status_to_code(status)
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSPORT
    text = str(exc).lower()
    for code, hints in _MESSAGE_HINTS:
        if any(h in text for h in hints):
            return code
    return ErrorCode.UNKNOWN


__all__ = ["classify_exception", "status_to_code"]
