"""
Domain models public surface.

Re-exports the implementations under ``policy_assistant.base.models_parts``.
"""

from .models_parts.position import Position
from .models_parts.diagnostic import Diagnostic, Severity, sort_diagnostics
from .models_parts.element_rule import ElementRule, Schema
from .models_parts.message import Message, Role
from .models_parts.request_payload import RequestPayload
from .models_parts.stream_frame import StreamFrame, ChunkDelta
from .models_parts.assistant_message import AssistantMessage, FinishReason

__all__ = [
    "Position",
    "Diagnostic",
    "Severity",
    "sort_diagnostics",
    "ElementRule",
    "Schema",
    "Message",
    "Role",
    "RequestPayload",
    "StreamFrame",
    "ChunkDelta",
    "AssistantMessage",
    "FinishReason",
]
