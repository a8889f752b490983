"""Cancellable iterator façade around :class:`StreamConsumer`.

Callers iterate events once and may call ``cancel`` at any time, from any
thread. The terminal event is captured for post-hoc inspection.
"""
from __future__ import annotations

import threading
from typing import Iterator, Optional

from .stream_consumer import StreamConsumer
from .streaming import ChatStreamEvent
from ..models import AssistantMessage


class StreamController:
    """High-level handle for one stream.

    Responsibilities:
      * Iterate over :class:`ChatStreamEvent` objects (single pass).
      * Expose ``cancel(reason)`` for cooperative cancellation.
      * Track the terminal event and the frozen :class:`AssistantMessage`.

    Subclasses observe the stream through ``_on_event`` and ``_on_abandon``.
    """

    def __init__(self, consumer: StreamConsumer) -> None:
        self._consumer = consumer
        self._claim_lock = threading.Lock()
        self._claimed = False
        self._terminal_event: Optional[ChatStreamEvent] = None

    def __iter__(self) -> Iterator[ChatStreamEvent]:
        if not self._claim():
            raise RuntimeError("stream already consumed")
        return self._events()

    def _claim(self) -> bool:
        with self._claim_lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    def _events(self) -> Iterator[ChatStreamEvent]:
        events = self._consumer.run()
        try:
            for evt in events:
                if evt.finish:
                    self._terminal_event = evt
                self._on_event(evt)
                yield evt
        finally:
            events.close()
            if self._terminal_event is None:
                self._consumer.token.cancel("abandoned")
                self._consumer.accumulator.cancel()
                self._on_abandon()

    def _on_event(self, event: ChatStreamEvent) -> None:
        """Called for every event before it is yielded."""

    def _on_abandon(self) -> None:
        """Called when iteration stops before the terminal event."""

    @property
    def started(self) -> bool:
        return self._claimed

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation; safe to call repeatedly or after completion."""
        self._consumer.token.cancel(reason)

    def drain(self) -> AssistantMessage:
        """Consume all remaining events and return the final message."""
        if self._claim():
            for _ in self._events():
                pass
        result = self.result
        if result is None:
            raise RuntimeError("stream is still being consumed elsewhere")
        return result

    @property
    def finished(self) -> bool:
        return self._terminal_event is not None

    @property
    def terminal_event(self) -> Optional[ChatStreamEvent]:
        return self._terminal_event

    @property
    def current_text(self) -> str:
        return self._consumer.current_text

    @property
    def result(self) -> Optional[AssistantMessage]:
        return self._consumer.accumulator.result

    @property
    def error(self) -> Optional[str]:
        return self._terminal_event.error if self._terminal_event else None


__all__ = ["StreamController"]
