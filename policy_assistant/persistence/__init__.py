"""Persistence for editor content and endpoint settings."""

from .interfaces import KeyValueStore
from .memory_store import InMemoryKeyValueStore
from .settings import EndpointSettings, load_settings, save_settings
from .sqlite_store import SqliteKeyValueStore

__all__ = [
    "EndpointSettings",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "load_settings",
    "save_settings",
]
