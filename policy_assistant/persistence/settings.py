"""Endpoint settings stored alongside the editor content.

The settings form writes the API key and URL together; reading falls back to
the default endpoint when no URL has been saved.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config.defaults import DEFAULT_API_URL, STORAGE_KEY_API_KEY, STORAGE_KEY_API_URL
from .interfaces import KeyValueStore


@dataclass(frozen=True)
class EndpointSettings:
    api_url: str
    api_key: Optional[str]


def load_settings(store: KeyValueStore) -> EndpointSettings:
    url = store.get(STORAGE_KEY_API_URL) or DEFAULT_API_URL
    key = store.get(STORAGE_KEY_API_KEY) or None
    return EndpointSettings(api_url=url, api_key=key)


def save_settings(store: KeyValueStore, api_url: str, api_key: str) -> EndpointSettings:
    """Persist both values; a blank URL restores the default endpoint."""
    url = api_url.strip() or DEFAULT_API_URL
    store.set(STORAGE_KEY_API_URL, url)
    if api_key:
        store.set(STORAGE_KEY_API_KEY, api_key)
    else:
        store.delete(STORAGE_KEY_API_KEY)
    return load_settings(store)


__all__ = ["EndpointSettings", "load_settings", "save_settings"]
