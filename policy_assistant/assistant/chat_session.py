"""Chat session: visible history and serialized streamed turns.

Purpose
-------
Own the chat history shown to the user and run one streamed turn at a time.
A second turn started while one is in flight is rejected with ``BUSY``.

History
-------
Each turn appends a ``user`` entry. The ``bot`` entry appears with the first
delta and is extended in place after every later delta. A transport failure
appends an ``error`` entry after whatever partial reply was received; a
cancelled turn keeps its partial reply and adds nothing.
"""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Tuple

from ..base.cancellation import CancellationToken
from ..base.errors import AssistantError, ErrorCode
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import AssistantMessage
from ..base.streaming import ChatStreamEvent, StreamConsumer, StreamController
from .prompts import PROPOSE_FIX_MESSAGE
from .request_builder import CompletionRequestBuilder
from .transport import CompletionTransport

EntryKind = Literal["user", "bot", "error"]
DeltaCallback = Callable[[str, str], None]


@dataclass(frozen=True)
class ChatEntry:
    """One line of the visible chat history."""

    kind: EntryKind
    text: str


class ChatTurn(StreamController):
    """A streamed reply bound to its session's history."""

    def __init__(self, session: "ChatSession", consumer: StreamConsumer, turn_id: str, message: str) -> None:
        super().__init__(consumer)
        self._session = session
        self.turn_id = turn_id
        self.message = message
        self.bot_index: Optional[int] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the turn; a turn nobody is iterating is finished immediately."""
        super().cancel(reason or "cancelled")
        if not self.started:
            self.drain()

    def close(self) -> None:
        """Stop an unfinished turn; a no-op once the terminal event was seen."""
        if not self.finished:
            self.cancel("closed")

    def _on_event(self, event: ChatStreamEvent) -> None:
        if event.finish:
            self._session._finish_turn(self, event)
        elif event.delta:
            self._session._apply_delta(self, event.text)

    def _on_abandon(self) -> None:
        self._session._release(self)


class ChatSession:
    """Serializes chat turns against one transport."""

    def __init__(
        self,
        transport: CompletionTransport,
        builder: Optional[CompletionRequestBuilder] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._transport = transport
        self._builder = builder or CompletionRequestBuilder()
        self._logger = logger or get_logger("policy_assistant.chat")
        self._lock = threading.RLock()
        self._history: List[ChatEntry] = []
        self._active: Optional[ChatTurn] = None

    @property
    def history(self) -> Tuple[ChatEntry, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def busy(self) -> bool:
        return self._active is not None

    @property
    def active_turn(self) -> Optional[ChatTurn]:
        return self._active

    def start_turn(self, message: str, document: str, *, token: Optional[CancellationToken] = None) -> ChatTurn:
        """Register a turn and return it unstarted; iterate it to stream the reply.

        Raises:
            AssistantError: ``VALIDATION`` for an empty message, ``BUSY`` when
                another turn is still in flight.
        """
        if not message or not message.strip():
            raise AssistantError(code=ErrorCode.VALIDATION, message="message must not be empty", component="chat")
        payload = self._builder.build_chat(message, document)
        with self._lock:
            if self._active is not None:
                log_event(
                    self._logger,
                    "chat.turn.rejected",
                    LogContext(component="chat", turn_id=self._active.turn_id),
                    level=logging.WARNING,
                    error_code=ErrorCode.BUSY.value,
                )
                raise AssistantError(
                    code=ErrorCode.BUSY,
                    message="a reply is still streaming",
                    component="chat",
                )
            turn_id = uuid.uuid4().hex[:12]
            ctx = LogContext(component="chat", turn_id=turn_id)
            consumer = StreamConsumer(
                starter=lambda: self._transport.open_stream(payload),
                token=token or CancellationToken(),
                logger=self._logger,
                ctx=ctx,
            )
            turn = ChatTurn(self, consumer, turn_id, message)
            self._history.append(ChatEntry("user", message))
            self._active = turn
        log_event(self._logger, "chat.turn.start", ctx, chars=len(document), max_tokens=payload.max_tokens)
        return turn

    def send(self, message: str, document: str, on_delta: Optional[DeltaCallback] = None) -> AssistantMessage:
        """Run a whole turn; ``on_delta(delta, current_text)`` sees each fragment."""
        turn = self.start_turn(message, document)
        for event in turn:
            if event.delta and on_delta is not None:
                on_delta(event.delta, event.text)
        return turn.drain()

    def propose_fix(self, document: str, on_delta: Optional[DeltaCallback] = None) -> AssistantMessage:
        """Ask the assistant to review ``document`` for syntax errors."""
        return self.send(PROPOSE_FIX_MESSAGE, document, on_delta)

    def clear(self) -> None:
        """Empty the history; rejected while a turn is streaming."""
        with self._lock:
            if self._active is not None:
                raise AssistantError(code=ErrorCode.BUSY, message="cannot clear while a reply is streaming", component="chat")
            self._history.clear()

    def _apply_delta(self, turn: ChatTurn, text: str) -> None:
        with self._lock:
            if turn is not self._active:
                return
            if turn.bot_index is None:
                turn.bot_index = len(self._history)
                self._history.append(ChatEntry("bot", text))
            else:
                self._history[turn.bot_index] = ChatEntry("bot", text)

    def _finish_turn(self, turn: ChatTurn, event: ChatStreamEvent) -> None:
        with self._lock:
            if turn is not self._active:
                return
            if event.finish_reason == "error" and event.error:
                self._history.append(ChatEntry("error", event.error))
            self._active = None

    def _release(self, turn: ChatTurn) -> None:
        with self._lock:
            if turn is self._active:
                self._active = None


__all__ = ["ChatSession", "ChatTurn", "ChatEntry"]
