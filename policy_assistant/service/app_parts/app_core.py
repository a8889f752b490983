from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import Depends
from pydantic import BaseModel, ConfigDict, Field

from policy_assistant.assistant import CompletionRequestBuilder, CompletionTransport
from policy_assistant.config import AssistantSettings, get_settings
from policy_assistant.config.defaults import STORAGE_KEY_API_URL
from policy_assistant.persistence import KeyValueStore, SqliteKeyValueStore, load_settings


class ValidateBody(BaseModel):
    """Document to validate, optionally against a caller-supplied schema.

    ``schema`` maps element names to their allowed attribute names.
    """

    model_config = ConfigDict(populate_by_name=True)

    document: str
    schema_: Optional[Dict[str, List[str]]] = Field(default=None, alias="schema")
    sort: bool = False


class ChatBody(BaseModel):
    message: str
    document: str = ""


class SuggestBody(BaseModel):
    document: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)


class SettingsBody(BaseModel):
    """Endpoint settings form; a blank URL restores the default endpoint."""

    api_url: str = ""
    api_key: str = ""


def mask_key(key: Optional[str]) -> Optional[str]:
    """Return ``key`` with all but the last four characters masked."""
    if not key:
        return None
    return "*" * max(len(key) - 4, 4) + key[-4:]


def get_settings_dep() -> AssistantSettings:
    """FastAPI dependency returning the merged configuration."""
    return get_settings()


def get_store_dep(settings: AssistantSettings = Depends(get_settings_dep)) -> KeyValueStore:
    """FastAPI dependency returning the persistent key/value store."""
    return SqliteKeyValueStore(settings.db_path)


def resolve_endpoint(settings: AssistantSettings, store: KeyValueStore) -> tuple[str, Optional[str]]:
    """Endpoint URL and key: saved form values win over configuration."""
    saved = load_settings(store)
    url = saved.api_url if store.get(STORAGE_KEY_API_URL) else settings.api_url
    return url, saved.api_key or settings.api_key


def get_transport_dep(
    settings: AssistantSettings = Depends(get_settings_dep),
    store: KeyValueStore = Depends(get_store_dep),
) -> CompletionTransport:
    """FastAPI dependency returning the completion transport."""
    url, key = resolve_endpoint(settings, store)
    return CompletionTransport(url, key)


def get_builder_dep(settings: AssistantSettings = Depends(get_settings_dep)) -> CompletionRequestBuilder:
    return CompletionRequestBuilder(max_context_chars=settings.max_context_chars)


__all__ = [
    "ChatBody",
    "SettingsBody",
    "SuggestBody",
    "ValidateBody",
    "get_builder_dep",
    "get_settings_dep",
    "get_store_dep",
    "get_transport_dep",
    "mask_key",
    "resolve_endpoint",
]
