"""Structured logging for the policy assistant.

Every component logs through a child of the ``policy_assistant`` logger and
emits events with ``log_event``: one JSON object per line with a stable
``event`` key (``validation.pass``, ``stream.end``, ``chat.turn.start`` ...).

Level resolution, highest priority first:

1. ``POLICY_ASSISTANT_LOG_LEVEL`` (re-read on every ``get_logger`` call so a
   test or a long-running service can change it without a restart)
2. the level last passed to ``configure_logger``
3. ``INFO``

``normalized_log_event`` adds the keys ``structured``, ``phase``,
``emitted`` and (when set) ``error_code`` so stream lifecycle events can be
filtered uniformly.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "policy_assistant"
LOG_LEVEL_ENV = "POLICY_ASSISTANT_LOG_LEVEL"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_MANAGED_ATTR = "_policy_assistant_handler"

_configured_level = logging.INFO
_json_mode = True


def _formatter() -> logging.Formatter:
    return JsonFormatter() if _json_mode else logging.Formatter(_PLAIN_FORMAT)


def _to_level(value: int | str | None, default: int) -> int:
    """Numeric level for ``value``; unknown names fall back to ``default``."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _managed(logger: logging.Logger, kind: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _MANAGED_ATTR, None) == kind]


def _drop(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(OSError, ValueError):
        handler.close()


def _attach(logger: logging.Logger, handler: logging.Handler, kind: str) -> None:
    setattr(handler, _MANAGED_ATTR, kind)
    handler.setFormatter(_formatter())
    logger.addHandler(handler)


def _base_logger() -> logging.Logger:
    """Return the shared base logger with a live stderr handler and current level."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    logger.propagate = False
    for handler in _managed(logger, "console"):
        # stderr may have been swapped (pytest capture); rebind when it changed
        if getattr(handler, "stream", None) is not sys.stderr:
            _drop(logger, handler)
    if not _managed(logger, "console"):
        _attach(logger, logging.StreamHandler(sys.stderr), "console")
    level = _to_level(os.getenv(LOG_LEVEL_ENV) or None, _configured_level)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME) -> logging.Logger:
    """Return ``policy_assistant`` or one of its children.

    Children carry no handlers and propagate to the base logger, so every
    event is written once. Names outside the namespace are prefixed.
    """
    base = _base_logger()
    if name == BASE_LOGGER_NAME:
        return base
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger.

    Parameters
    ----------
    level: int | str | None
        New default level; ``None`` keeps the current one. The environment
        variable still takes precedence.
    file_path: Optional[str]
        Attach a rotating file handler writing to this path. ``None`` removes
        the file handler previously attached here.
    json_mode: bool
        JSON lines (default) or plain text for every managed handler.
    """
    global _configured_level, _json_mode
    _configured_level = _to_level(level, _configured_level)
    _json_mode = json_mode
    logger = logging.getLogger(BASE_LOGGER_NAME)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for handler in _managed(logger, "file"):
        if target is None or getattr(handler, "baseFilename", None) != target:
            _drop(logger, handler)
    if target is not None and not _managed(logger, "file"):
        os.makedirs(os.path.dirname(target), exist_ok=True)
        handler = RotatingFileHandler(target, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8")
        _attach(logger, handler, "file")

    for handler in _managed(logger, "console") + _managed(logger, "file"):
        handler.setFormatter(_formatter())
    return _base_logger()


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    keep_none: bool = False,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Write ``event`` plus ``ctx`` and ``fields`` as one JSON line.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    payload |= fields if keep_none else {k: v for k, v in fields.items() if v is not None}
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "error_code", "emitted")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    error_code: str | None = None,
    emitted: bool | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a lifecycle event carrying the normalized key set.

    ``error_code`` appears only when set. Extra fields never overwrite the
    normalized keys and ``None`` extras are dropped.
    """
    fields: Dict[str, Any] = {"structured": True, "phase": phase, "emitted": emitted}
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and key not in fields:
            fields[key] = value
    log_event(logger, event, ctx, keep_none=True, level=level, **fields)


__all__ = [
    "LogContext",
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
