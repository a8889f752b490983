"""policy_assistant.config.env
============================

Environment variable names and small lookup helpers.

Design Notes
------------
- The API key is read from ``POLICY_ASSISTANT_API_KEY`` first and falls back
  to ``OPENAI_API_KEY``; ``API_KEY_ENV_ALIASES`` lists them in precedence order.
- Helpers never raise for unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

CONFIG_FILE_ENV = "POLICY_ASSISTANT_CONFIG_FILE"
API_URL_ENV = "POLICY_ASSISTANT_API_URL"
API_KEY_ENV_ALIASES: Tuple[str, ...] = ("POLICY_ASSISTANT_API_KEY", "OPENAI_API_KEY")
MAX_CONTEXT_CHARS_ENV = "POLICY_ASSISTANT_MAX_CONTEXT_CHARS"
DB_PATH_ENV = "POLICY_ASSISTANT_DB_PATH"
CORS_ORIGINS_ENV = "POLICY_ASSISTANT_CORS_ORIGINS"

# Config field -> environment variable (single-name fields)
ENV_FIELD_MAP: Dict[str, str] = {
    "api_url": API_URL_ENV,
    "max_context_chars": MAX_CONTEXT_CHARS_ENV,
    "db_path": DB_PATH_ENV,
    "cors_origins": CORS_ORIGINS_ENV,
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True for values that look like placeholders (``changeme``, ``<your-key>``...)."""
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or (v.startswith("<") and v.endswith(">"))


def resolve_api_key() -> Optional[str]:
    """Return the first non-empty, non-placeholder API key from the environment."""
    for name in API_KEY_ENV_ALIASES:
        val = os.getenv(name)
        if val and val.strip() and not is_placeholder(val):
            return val.strip()
    return None


__all__ = [
    "CONFIG_FILE_ENV",
    "API_URL_ENV",
    "API_KEY_ENV_ALIASES",
    "MAX_CONTEXT_CHARS_ENV",
    "DB_PATH_ENV",
    "CORS_ORIGINS_ENV",
    "ENV_FIELD_MAP",
    "is_placeholder",
    "resolve_api_key",
]
