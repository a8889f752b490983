"""
RequestPayload: the JSON body sent to the completion endpoint.

The serialized field order is ``model, messages, max_tokens, n, stream,
temperature``. ``stream`` is present only for streamed requests; single-shot
suggestion bodies omit it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .message import Message


@dataclass(frozen=True)
class RequestPayload:
    """Immutable completion request.

    Attributes:
        model: Model literal (``"gpt-4"``).
        messages: System message followed by the templated user message.
        max_tokens: 500 for streamed chat turns, 100 for suggestions.
        n: Number of choices; always 1.
        stream: Whether the endpoint should stream ``data:`` frames.
        temperature: Sampling temperature; always 0.7.
    """

    model: str
    messages: Tuple[Message, ...]
    max_tokens: int
    n: int
    stream: bool
    temperature: float

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable request body."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "max_tokens": self.max_tokens,
            "n": self.n,
        }
        if self.stream:
            body["stream"] = True
        body["temperature"] = self.temperature
        return body


__all__ = ["RequestPayload"]
