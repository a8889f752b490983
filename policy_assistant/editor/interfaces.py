"""Editor surface contract.

The session only needs to read the buffer, publish markers and hear about
content changes; any editor widget or test double with these three methods
works.
"""
from __future__ import annotations

from typing import Callable, List, Protocol, runtime_checkable

from ..base.models import Diagnostic

Unsubscribe = Callable[[], None]


@runtime_checkable
class EditorSurface(Protocol):
    def get_value(self) -> str:
        """Return the full current text."""
        ...

    def set_markers(self, diagnostics: List[Diagnostic]) -> None:
        """Replace every marker with ``diagnostics``."""
        ...

    def on_did_change_content(self, listener: Callable[[], None]) -> Unsubscribe:
        """Register ``listener`` for content changes; returns the unsubscribe callable."""
        ...


__all__ = ["EditorSurface", "Unsubscribe"]
