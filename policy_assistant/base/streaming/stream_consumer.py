"""Stream consumer: the read loop of one streamed chat turn.

Purpose
-------
Open the response stream, feed raw chunks to :class:`StreamFrameParser`,
fold frames with :class:`DeltaAccumulator` and yield a
:class:`ChatStreamEvent` per accepted delta followed by exactly one terminal
event.

Lifecycle
---------
- ``starter`` is a zero-argument callable returning a context manager that
  yields an iterable of ``bytes`` (or ``str``) chunks; the transport's
  ``open_stream`` bound to a payload fits this shape.
- Reading stops after ``[DONE]``; any later body content is ignored.
- The cancellation token is checked before every chunk. On cancellation the
  pending partial line is discarded and the turn ends ``cancelled``.
- End of body without ``[DONE]`` ends the turn ``closed``; a trailing
  partial line is dropped and logged.
- Transport failures, decode errors and unexpected exceptions end the turn
  ``error``. The text accumulated before the failure is kept.
"""
from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager
from typing import Callable, Iterable, Iterator, Optional, Union

import httpx

from .delta_accumulator import DeltaAccumulator
from .frame_parser import StreamFrameParser
from .streaming import ChatStreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics
from ..cancellation import CancellationToken, CancelledError
from ..errors import AssistantError, ErrorCode, TransportFailure, classify_exception
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import AssistantMessage

Chunk = Union[bytes, str]
StreamStarter = Callable[[], AbstractContextManager[Iterable[Chunk]]]


class StreamConsumer:
    """Drives one streamed reply from transport bytes to chat events."""

    def __init__(
        self,
        *,
        starter: StreamStarter,
        token: Optional[CancellationToken] = None,
        parser: Optional[StreamFrameParser] = None,
        accumulator: Optional[DeltaAccumulator] = None,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._starter = starter
        self._token = token or CancellationToken()
        self._logger = logger or get_logger("policy_assistant.stream")
        self._ctx = ctx
        self.parser = parser or StreamFrameParser()
        self.accumulator = accumulator or DeltaAccumulator(logger=self._logger, ctx=ctx)
        self.metrics = StreamMetrics()
        self._t0 = 0.0

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def current_text(self) -> str:
        return self.accumulator.current_text

    def run(self) -> Iterator[ChatStreamEvent]:
        """Execute the stream lifecycle, yielding delta events then a terminal event."""
        self._t0 = time.perf_counter()
        normalized_log_event(self._logger, "stream.start", self._ctx, phase="start", emitted=False)
        try:
            self._token.raise_if_cancelled()
            with self._starter() as chunks:
                for chunk in chunks:
                    self._token.raise_if_cancelled()
                    yield from self._consume_chunk(chunk)
                    if self.accumulator.done:
                        break
        except CancelledError:
            self.parser.discard()
            yield self._finish(self.accumulator.cancel(), ErrorCode.CANCELLED.value)
            return
        except AssistantError as exc:
            yield self._fail(exc)
            return
        except UnicodeDecodeError as exc:
            yield self._fail(TransportFailure(f"response body is not valid UTF-8: {exc.reason}", raw=exc))
            return
        except (httpx.HTTPError, OSError) as exc:
            yield self._fail(TransportFailure(str(exc) or exc.__class__.__name__, code=classify_exception(exc), raw=exc))
            return
        except Exception as exc:  # noqa: BLE001 - turn must end with a terminal event
            yield self._fail(AssistantError(code=ErrorCode.INTERNAL, message=repr(exc), component="stream", raw=exc))
            return

        if self.accumulator.done:
            self.parser.discard()
            yield self._finish(self.accumulator.complete("done"))
            return
        dropped = self.parser.finish()
        if dropped:
            log_event(self._logger, "stream.partial_discarded", self._ctx, chars=dropped)
        yield self._finish(self.accumulator.complete("closed"))

    def _consume_chunk(self, chunk: Chunk) -> Iterator[ChatStreamEvent]:
        frames = self.parser.feed_bytes(chunk) if isinstance(chunk, bytes) else self.parser.feed(chunk)
        for frame in frames:
            self.metrics.frames += 1
            malformed_before = len(self.accumulator.malformed)
            delta = self.accumulator.accept(frame)
            if len(self.accumulator.malformed) != malformed_before:
                self.metrics.malformed += 1
            if delta is not None:
                if self.metrics.time_to_first_delta_ms is None:
                    self.metrics.time_to_first_delta_ms = (time.perf_counter() - self._t0) * 1000.0
                self.metrics.emitted += 1
                yield ChatStreamEvent(delta=delta.text, text=self.accumulator.current_text)
            if self.accumulator.done:
                return

    def _fail(self, exc: AssistantError) -> ChatStreamEvent:
        self.parser.discard()
        return self._finish(self.accumulator.fail(exc.message), exc.code.value)

    def _finish(self, result: AssistantMessage, error_code: Optional[str] = None) -> ChatStreamEvent:
        self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
        return finalize_stream(
            logger=self._logger,
            ctx=self._ctx,
            metrics=self.metrics,
            result=result,
            error_code=error_code,
        )


__all__ = ["StreamConsumer", "StreamStarter"]
