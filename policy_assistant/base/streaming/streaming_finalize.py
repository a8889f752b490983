"""Finalize stream helper.

Creates the terminal :class:`ChatStreamEvent` of a turn and emits one
normalized summary log event carrying the stream metrics.
"""
from __future__ import annotations

import logging
from typing import Optional

from .streaming import ChatStreamEvent
from .streaming_metrics import StreamMetrics
from ..logging import LogContext, normalized_log_event
from ..models import AssistantMessage


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext],
    metrics: StreamMetrics,
    result: AssistantMessage,
    error_code: Optional[str] = None,
) -> ChatStreamEvent:
    """Log the end of a stream and return its terminal event."""
    if result.finish_reason == "error":
        event, level = "stream.error", logging.WARNING
    elif result.finish_reason == "cancelled":
        event, level = "stream.cancelled", logging.INFO
    else:
        event, level = "stream.end", logging.INFO
    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        error_code=error_code,
        emitted=metrics.emitted > 0,
        level=level,
        finish_reason=result.finish_reason,
        frames=metrics.frames,
        emitted_count=metrics.emitted,
        malformed_count=metrics.malformed,
        chars=len(result.text),
        time_to_first_delta_ms=metrics.time_to_first_delta_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=result.error,
    )
    return ChatStreamEvent(
        delta=None,
        text=result.text,
        finish=True,
        finish_reason=result.finish_reason,
        error=result.error,
        error_code=error_code,
    )


__all__ = ["finalize_stream"]
