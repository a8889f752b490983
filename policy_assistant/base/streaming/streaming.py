"""Streaming event type shared by the stream consumer, chat turns and the service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ChatStreamEvent:
    """One step of a streamed chat turn.

    Fields:
      delta: text fragment added by this event (``None`` for the terminal event)
      text: full accumulated text after this event
      finish: True on the terminal event only
      finish_reason: ``done``, ``closed``, ``cancelled`` or ``error`` on the terminal event
      error: error description (terminal event of a failed turn)
      error_code: normalized :class:`ErrorCode` value for ``error``
    """

    delta: Optional[str]
    text: str
    finish: bool = False
    finish_reason: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the NDJSON line shape used by the HTTP service."""
        if self.error is not None:
            kind = "error"
        elif self.finish:
            kind = "final"
        else:
            kind = "delta"
        return {
            "type": kind,
            "delta": self.delta,
            "text": self.text,
            "finish": self.finish,
            "finish_reason": self.finish_reason,
            "error": self.error,
            "error_code": self.error_code,
        }


__all__ = ["ChatStreamEvent"]
