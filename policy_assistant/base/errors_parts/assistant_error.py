"""
Structured assistant error types.

``AssistantError`` wraps a failure with a normalized :class:`ErrorCode`. The
four kinds raised by the core components subclass it so callers can catch
either the precise kind or the whole family:

- ``TransportFailure``: the completion endpoint failed or returned an error body.
- ``MalformedFrame``: a stream frame payload could not be decoded.
- ``AnchorNotFound``: a position lookup could not find its anchor text.
- ``MalformedDocument``: the policy document is not well-formed XML.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class AssistantError(Exception):
    """Represents a structured assistant error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        component: Component where the error originated (e.g. ``"transport"``).
        status: HTTP status when the failure came from a response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    component: str = "assistant"
    status: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.component} {self.code.value}: {self.message}"


class TransportFailure(AssistantError):
    """The completion endpoint could not be reached or reported an error."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.TRANSPORT,
        status: Optional[int] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(code=code, message=message, component="transport", status=status, raw=raw)


class MalformedFrame(AssistantError):
    """A ``data:`` frame whose payload is not a decodable completion chunk."""

    def __init__(self, message: str, *, frame: str = "", raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.MALFORMED_FRAME, message=message, component="stream", raw=raw)
        self.frame = frame


class AnchorNotFound(AssistantError):
    """The anchor text of a position lookup is absent from the document."""

    def __init__(self, anchor: str, start_offset: int = 0) -> None:
        super().__init__(
            code=ErrorCode.ANCHOR_NOT_FOUND,
            message=f"anchor {anchor!r} not found at or after offset {start_offset}",
            component="validation",
        )
        self.anchor = anchor
        self.start_offset = start_offset


class MalformedDocument(AssistantError):
    """The policy document could not be parsed as XML."""

    def __init__(self, message: str, *, offset: int = 0, raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.MALFORMED_DOCUMENT, message=message, component="validation", raw=raw)
        self.offset = offset


__all__ = [
    "AssistantError",
    "TransportFailure",
    "MalformedFrame",
    "AnchorNotFound",
    "MalformedDocument",
]
