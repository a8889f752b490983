"""
StreamFrame and ChunkDelta value objects.

A frame is one complete ``data:`` line with the prefix stripped. The
``[DONE]`` sentinel is carried as a frame with ``terminal=True`` so consumers
can treat end-of-stream explicitly instead of comparing strings.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..constants import DONE_SENTINEL


@dataclass(frozen=True)
class StreamFrame:
    """One complete ``data:`` line (prefix removed)."""

    raw: str
    terminal: bool = False

    @classmethod
    def done(cls) -> "StreamFrame":
        return cls(raw=DONE_SENTINEL, terminal=True)


@dataclass(frozen=True)
class ChunkDelta:
    """A non-empty text fragment extracted from one frame."""

    text: str


__all__ = ["StreamFrame", "ChunkDelta"]
