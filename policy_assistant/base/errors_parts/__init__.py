"""Errors parts package public surface.

Prefer importing from ``policy_assistant.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .assistant_error import (
    AssistantError,
    TransportFailure,
    MalformedFrame,
    AnchorNotFound,
    MalformedDocument,
)
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "AssistantError",
    "TransportFailure",
    "MalformedFrame",
    "AnchorNotFound",
    "MalformedDocument",
    "classify_exception",
]
