"""Fold stream frames into the growing assistant reply.

The accumulator is the single writer of ``current_text``. It is an explicit
state machine:

``NO_ACTIVE_MESSAGE`` --first delta--> ``ACCUMULATING`` --end--> ``COMPLETED``

and ``NO_ACTIVE_MESSAGE`` --end--> ``COMPLETED`` for a reply with no text.

Malformed frames (undecodable JSON, JSON nested too deeply, or a payload of
the wrong shape) are recorded, logged and skipped; the next well-formed
frame is still accepted. An ``error`` member is logged but does not hide a
``choices[0].delta.content`` carried in the same frame. A bare ``[DONE]``
frame ends the stream like the terminal one the parser builds.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from ..constants import DONE_SENTINEL
from ..dto.completion import StreamChunkDTO
from ..errors import MalformedFrame
from ..logging import LogContext, get_logger, log_event
from ..models import AssistantMessage, ChunkDelta, FinishReason, StreamFrame

_PREVIEW_CHARS = 120


class AccumulatorState(str, Enum):
    NO_ACTIVE_MESSAGE = "no_active_message"
    ACCUMULATING = "accumulating"
    COMPLETED = "completed"


class DeltaAccumulator:
    """Extract ``choices[0].delta.content`` from frames and append it."""

    def __init__(self, *, logger: Optional[logging.Logger] = None, ctx: Optional[LogContext] = None) -> None:
        self._logger = logger or get_logger("policy_assistant.stream")
        self._ctx = ctx
        self._parts: List[str] = []
        self._state = AccumulatorState.NO_ACTIVE_MESSAGE
        self._done = False
        self._malformed: List[MalformedFrame] = []
        self._result: Optional[AssistantMessage] = None

    @property
    def state(self) -> AccumulatorState:
        return self._state

    @property
    def current_text(self) -> str:
        """Text accumulated so far; read-only for callers."""
        return "".join(self._parts)

    @property
    def done(self) -> bool:
        """Whether the ``[DONE]`` frame was seen."""
        return self._done

    @property
    def malformed(self) -> List[MalformedFrame]:
        return list(self._malformed)

    @property
    def result(self) -> Optional[AssistantMessage]:
        return self._result

    def accept(self, frame: StreamFrame) -> Optional[ChunkDelta]:
        """Consume one frame; return the delta it carried, if any."""
        if self._done or self._state is AccumulatorState.COMPLETED:
            return None
        if frame.terminal or frame.raw == DONE_SENTINEL:
            self._done = True
            return None
        try:
            chunk = StreamChunkDTO.model_validate(json.loads(frame.raw))
        except (ValueError, ValidationError, RecursionError) as exc:
            # RecursionError: deeply nested JSON
            self._record_malformed(frame, exc)
            return None
        if chunk.error is not None:
            log_event(
                self._logger,
                "stream.frame.error",
                self._ctx,
                level=logging.WARNING,
                message=chunk.error.message,
            )
        text = chunk.first_content()
        if not text:
            return None
        self._parts.append(text)
        self._state = AccumulatorState.ACCUMULATING
        return ChunkDelta(text=text)

    def complete(self, reason: FinishReason = "done") -> AssistantMessage:
        """Freeze the reply; ``reason`` defaults to ``done``."""
        return self._freeze(reason, None)

    def cancel(self) -> AssistantMessage:
        return self._freeze("cancelled", None)

    def fail(self, error: str) -> AssistantMessage:
        """Freeze the reply as failed; partial text is kept."""
        return self._freeze("error", error)

    def _freeze(self, reason: FinishReason, error: Optional[str]) -> AssistantMessage:
        if self._result is None:
            self._state = AccumulatorState.COMPLETED
            self._result = AssistantMessage(text=self.current_text, finish_reason=reason, error=error)
        return self._result

    def _record_malformed(self, frame: StreamFrame, exc: Exception) -> None:
        err = MalformedFrame(f"undecodable frame: {exc.__class__.__name__}", frame=frame.raw, raw=exc)
        self._malformed.append(err)
        log_event(
            self._logger,
            "stream.frame.malformed",
            self._ctx,
            level=logging.WARNING,
            error_code=err.code.value,
            frame=frame.raw[:_PREVIEW_CHARS],
        )


__all__ = ["DeltaAccumulator", "AccumulatorState"]
