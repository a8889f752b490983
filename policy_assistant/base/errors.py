"""Unified assistant error taxonomy public surface.

Re-exports the implementations under ``policy_assistant.base.errors_parts``
to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.assistant_error import (
    AssistantError,
    TransportFailure,
    MalformedFrame,
    AnchorNotFound,
    MalformedDocument,
)
from .errors_parts.classification import classify_exception, status_to_code

__all__ = [
    "ErrorCode",
    "AssistantError",
    "TransportFailure",
    "MalformedFrame",
    "AnchorNotFound",
    "MalformedDocument",
    "classify_exception",
    "status_to_code",
]
