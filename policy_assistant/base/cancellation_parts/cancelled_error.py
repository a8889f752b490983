"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cooperative cancellation request.

    Kept distinct from transport failures so a cancelled chat turn is reported
    as ``cancelled`` and never as an error entry in the chat history.
    """


__all__ = ["CancelledError"]
