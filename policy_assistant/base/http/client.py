"""Pooled ``httpx`` clients for completion endpoints.

One client per ``(endpoint URL, purpose)`` keeps connections alive across
chat turns and suggestion requests. The streamed purpose gets the idle
stream timeout for reads; single-shot requests use the HTTP timeout. Every
pooled client is closed at interpreter exit.
"""

from __future__ import annotations

import atexit
import contextlib
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_pool: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_pool_lock = threading.Lock()


def _timeout_for(purpose: str) -> httpx.Timeout:
    cfg = get_timeout_config()
    read = cfg.stream_timeout_seconds if purpose == "stream" else cfg.http_timeout_seconds
    return httpx.Timeout(cfg.http_timeout_seconds, connect=cfg.start_timeout_seconds, read=read)


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Shared client for ``base_url`` and ``purpose`` (``"stream"`` or ``"complete"``)."""
    key = (base_url, purpose)
    with _pool_lock:
        client = _pool.get(key)
        if client is None or client.is_closed:
            client = _pool[key] = httpx.Client(timeout=_timeout_for(purpose))
        return client


def close_all_clients() -> None:
    with _pool_lock:
        clients = list(_pool.values())
        _pool.clear()
    for client in clients:
        with contextlib.suppress(httpx.HTTPError, OSError):
            client.close()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
