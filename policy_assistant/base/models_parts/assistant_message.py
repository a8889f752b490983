"""
AssistantMessage: the frozen result of one streamed reply.

Produced by the delta accumulator when the stream ends (``[DONE]``, stream
close, cancellation or transport failure). Partial text is kept on failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

FinishReason = Literal["done", "closed", "cancelled", "error"]


@dataclass(frozen=True)
class AssistantMessage:
    """Final assistant text and how the stream ended.

    Attributes:
        text: All accepted deltas concatenated in arrival order.
        finish_reason: ``done`` for ``[DONE]``, ``closed`` when the body ended
            without the sentinel, ``cancelled`` or ``error``.
        error: Error description when ``finish_reason == "error"``.
    """

    text: str
    finish_reason: FinishReason
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.finish_reason in ("done", "closed")


__all__ = ["AssistantMessage", "FinishReason"]
