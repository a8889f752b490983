"""
Normalized assistant error codes (taxonomy).

Values are lowercase snake_case and form a stable contract for logs, service
responses and CLI output.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    TRANSPORT = "transport"
    MALFORMED_FRAME = "malformed_frame"
    ANCHOR_NOT_FOUND = "anchor_not_found"
    MALFORMED_DOCUMENT = "malformed_document"
    BUSY = "busy"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
