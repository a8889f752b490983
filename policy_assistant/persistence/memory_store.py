"""Process-local :class:`KeyValueStore` used by tests and the CLI."""
from __future__ import annotations

import threading
from typing import Dict, Mapping, Optional


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._values)


__all__ = ["InMemoryKeyValueStore"]
