"""Key/value storage contract for editor state and endpoint settings.

Values are strings keyed by short names (``apiKey``, ``apiUrl``,
``editorContent``). Implementations never raise for a missing key; ``get``
returns ``None`` instead.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Persistent string store."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or ``None``."""
        ...

    def set(self, key: str, value: str) -> None:
        """Insert or replace ``key``."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        ...


__all__ = ["KeyValueStore"]
