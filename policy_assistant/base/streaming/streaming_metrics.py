"""Streaming metrics for a single chat turn."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamMetrics:
    """Counters and timings collected while a reply streams.

    ``frames`` counts every complete ``data:`` frame (including ``[DONE]``),
    ``emitted`` the frames that produced text and ``malformed`` the frames
    that were skipped as undecodable.
    """

    frames: int = 0
    emitted: int = 0
    malformed: int = 0
    time_to_first_delta_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None


__all__ = ["StreamMetrics"]
