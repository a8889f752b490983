"""Cooperative cancellation token for one streamed chat turn.

The stream consumer checks the token before opening the response and before
each chunk. Whoever holds the turn (the chat UI, the editor session on
dispose, an abandoned iterator) cancels it; the first reason is kept.
"""

from __future__ import annotations

import threading
from typing import Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """Thread-safe, one-way cancellation flag with a reason."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Request cancellation; returns ``False`` when already cancelled."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; returns ``cancelled``."""
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError(self._reason or "turn cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"CancellationToken(cancelled={self.cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
