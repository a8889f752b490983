"""policy_assistant.config.defaults
================================

Small, stable default values used across the assistant, the HTTP service and
the CLI. Everything here can be overridden through ``get_assistant_config``.
Only plain constants live here; this module imports nothing from the package.
"""

from __future__ import annotations

# ---- Endpoint ----
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"

# ---- Editor ----
DEFAULT_POLICY_DOCUMENT = (
    "<policies>\n"
    "      <inbound></inbound>\n"
    "      <backend></backend>\n"
    "      <outbound></outbound>\n"
    "      <on-error></on-error>\n"
    "    </policies>"
)

# Keys used with the key-value persistence collaborator
STORAGE_KEY_API_KEY = "apiKey"  # pragma: allowlist secret - storage key name, not a secret
STORAGE_KEY_API_URL = "apiUrl"
STORAGE_KEY_EDITOR_CONTENT = "editorContent"

# ---- Request shaping ----
# 0 disables document condensation in prompts
DEFAULT_MAX_CONTEXT_CHARS = 0

# ---- Service / HTTP layer ----
SERVICE_DEFAULT_HOST = "127.0.0.1"
SERVICE_DEFAULT_PORT = 8091
# Comma-separated list of allowed origins for the dev server.
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

# ---- SQLite ----
SQLITE_DEFAULT_FILENAME = "policy_assistant.db"
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_JOURNAL_MODE = "WAL"
SQLITE_SYNCHRONOUS = "NORMAL"

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_POLICY_DOCUMENT",
    "STORAGE_KEY_API_KEY",
    "STORAGE_KEY_API_URL",
    "STORAGE_KEY_EDITOR_CONTENT",
    "DEFAULT_MAX_CONTEXT_CHARS",
    "SERVICE_DEFAULT_HOST",
    "SERVICE_DEFAULT_PORT",
    "SERVICE_CORS_DEFAULT_ORIGINS",
    "SQLITE_DEFAULT_FILENAME",
    "SQLITE_BUSY_TIMEOUT_MS",
    "SQLITE_JOURNAL_MODE",
    "SQLITE_SYNCHRONOUS",
]
