"""Editor session: validation, persistence and chat around one editor.

Each content change validates the full snapshot, replaces the marker list,
updates ``has_errors`` and saves the text under ``editorContent``. Disposing
the session unsubscribes from the editor and cancels the chat turn in flight,
after which change notifications do nothing.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..assistant.chat_session import ChatSession, DeltaCallback
from ..base.errors import AssistantError, ErrorCode
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import AssistantMessage, Diagnostic
from ..catalog.schema import SchemaSource
from ..config.defaults import DEFAULT_POLICY_DOCUMENT, STORAGE_KEY_EDITOR_CONTENT
from ..persistence.interfaces import KeyValueStore
from ..validation import AttributeValidator
from .interfaces import EditorSurface, Unsubscribe

ErrorsListener = Callable[[bool], None]


def initial_content(store: KeyValueStore) -> str:
    """Saved editor text, or the default policy document."""
    return store.get(STORAGE_KEY_EDITOR_CONTENT) or DEFAULT_POLICY_DOCUMENT


class PolicyEditorSession:
    """Binds an editor surface to the validator, the store and a chat session."""

    def __init__(
        self,
        editor: EditorSurface,
        store: KeyValueStore,
        schema: Optional[SchemaSource] = None,
        chat: Optional[ChatSession] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._editor = editor
        self._store = store
        self._chat = chat
        self._logger = logger or get_logger("policy_assistant.editor")
        self._validator = AttributeValidator(schema, logger=self._logger)
        self._ctx = LogContext(component="editor")
        self._lock = threading.Lock()
        self._unsubscribe: Optional[Unsubscribe] = None
        self._disposed = False
        self._diagnostics: List[Diagnostic] = []
        self._listeners: List[ErrorsListener] = []

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on_errors_changed(self, listener: ErrorsListener) -> None:
        self._listeners.append(listener)

    def attach(self) -> "PolicyEditorSession":
        """Subscribe to content changes and validate the current text."""
        with self._lock:
            if self._disposed:
                raise RuntimeError("editor session is disposed")
            if self._unsubscribe is None:
                self._unsubscribe = self._editor.on_did_change_content(self.handle_change)
        self.handle_change()
        return self

    def handle_change(self) -> None:
        with self._lock:
            if self._disposed:
                return
            text = self._editor.get_value()
            diagnostics = self._validator.validate(text)
            had_errors = bool(self._diagnostics)
            self._diagnostics = diagnostics
            self._editor.set_markers(list(diagnostics))
            self._store.set(STORAGE_KEY_EDITOR_CONTENT, text)
            listeners = list(self._listeners) if had_errors != bool(diagnostics) else []
        log_event(self._logger, "editor.change", self._ctx, level=logging.DEBUG, chars=len(text), diagnostics=len(diagnostics))
        for listener in listeners:
            listener(bool(diagnostics))

    def _require_chat(self) -> ChatSession:
        if self._disposed:
            raise AssistantError(code=ErrorCode.CANCELLED, message="editor session is disposed", component="editor")
        if self._chat is None:
            raise AssistantError(code=ErrorCode.VALIDATION, message="no chat session configured", component="editor")
        return self._chat

    def send_chat(self, message: str, on_delta: Optional[DeltaCallback] = None) -> AssistantMessage:
        """Send ``message`` with the current editor text as context."""
        return self._require_chat().send(message, self._editor.get_value(), on_delta)

    def propose_fix(self, on_delta: Optional[DeltaCallback] = None) -> AssistantMessage:
        return self._require_chat().propose_fix(self._editor.get_value(), on_delta)

    def dispose(self) -> None:
        """Detach from the editor and cancel the active chat turn; idempotent."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        turn = self._chat.active_turn if self._chat is not None else None
        if turn is not None:
            turn.cancel("disposed")
        log_event(self._logger, "editor.dispose", self._ctx, cancelled_turn=turn.turn_id if turn else None)


__all__ = ["PolicyEditorSession", "initial_content"]
