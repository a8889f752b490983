"""Unified configuration layer for the policy assistant.

Goals
-----
* Centralize defaults (endpoint URL, default document, service and SQLite settings).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional config file (JSON or YAML) named by ``POLICY_ASSISTANT_CONFIG_FILE``
    3. Environment variables
    4. In-code overrides
* Expose a validated view, :class:`AssistantSettings`, for the service and CLI.

External Config File
--------------------
Keys match the :class:`AssistantSettings` fields::

    api_url: https://my-gateway.openai.azure.com/openai/deployments/gpt-4/chat/completions?api-version=2024-02-01
    max_context_chars: 20000
    db_path: ~/.policy_assistant/state.db

Public API
----------
* get_assistant_config(overrides: dict | None = None) -> dict
* get_settings(overrides: dict | None = None) -> AssistantSettings
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .defaults import (
    DEFAULT_API_URL,
    DEFAULT_MAX_CONTEXT_CHARS,
    SERVICE_CORS_DEFAULT_ORIGINS,
    SERVICE_DEFAULT_HOST,
    SERVICE_DEFAULT_PORT,
)
from .env import CONFIG_FILE_ENV, ENV_FIELD_MAP, resolve_api_key

DEFAULTS: Dict[str, Any] = {
    "api_url": DEFAULT_API_URL,
    "api_key": None,
    "max_context_chars": DEFAULT_MAX_CONTEXT_CHARS,
    "db_path": None,
    "host": SERVICE_DEFAULT_HOST,
    "port": SERVICE_DEFAULT_PORT,
    "cors_origins": SERVICE_CORS_DEFAULT_ORIGINS,
}


class AssistantSettings(BaseModel):
    """Validated configuration snapshot."""

    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    max_context_chars: int = Field(default=DEFAULT_MAX_CONTEXT_CHARS, ge=0)
    db_path: Optional[str] = None
    host: str = SERVICE_DEFAULT_HOST
    port: int = Field(default=SERVICE_DEFAULT_PORT, gt=0, lt=65536)
    cors_origins: str = SERVICE_CORS_DEFAULT_ORIGINS

    @field_validator("api_url")
    @classmethod
    def _url_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("api_url must be non-empty")
        return v.strip()

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the external config mapping (``{}`` when unset or missing).

    JSON is tried first, then YAML. A file that parses to something other
    than a mapping is ignored.

    Raises:
        ValueError: when the file exists but is neither valid JSON nor YAML.
    """
    path = path or os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"{p}: not valid JSON or YAML: {exc}") from exc
    return dict(data) if isinstance(data, dict) else {}


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, env_name in ENV_FIELD_MAP.items():
        val = os.getenv(env_name)
        if val is not None and val.strip():
            out[field] = val.strip()
    if key := resolve_api_key():
        out["api_key"] = key
    return out


def get_assistant_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged configuration mapping.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= {k: v for k, v in load_config_file().items() if k in DEFAULTS}
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def get_settings(overrides: Optional[Dict[str, Any]] = None) -> AssistantSettings:
    """Validated :class:`AssistantSettings` built from ``get_assistant_config``."""
    return AssistantSettings.model_validate(get_assistant_config(overrides))


__all__ = [
    "AssistantSettings",
    "DEFAULTS",
    "get_assistant_config",
    "get_settings",
    "load_config_file",
]
