"""Timeout settings and the wall-clock guard used around blocking request phases.

Environment variables (optional, positive seconds):

- ``POLICY_ASSISTANT_TIMEOUT_START_SECONDS``: opening a stream, up to headers
- ``POLICY_ASSISTANT_TIMEOUT_STREAM_SECONDS``: idle gap between streamed chunks
- ``POLICY_ASSISTANT_TIMEOUT_HTTP_SECONDS``: a whole single-shot request

``get_timeout_config`` caches per distinct set of values, so a test that
changes the environment sees the new numbers immediately.
"""
from __future__ import annotations

import os
import signal
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional

START_ENV = "POLICY_ASSISTANT_TIMEOUT_START_SECONDS"
STREAM_ENV = "POLICY_ASSISTANT_TIMEOUT_STREAM_SECONDS"
HTTP_ENV = "POLICY_ASSISTANT_TIMEOUT_HTTP_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Timeouts in seconds."""

    start_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 30.0


def _seconds(raw: Optional[str], default: float) -> float:
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@lru_cache(maxsize=8)
def _config_for(start: Optional[str], stream: Optional[str], http: Optional[str]) -> TimeoutConfig:
    d = TimeoutConfig()
    return TimeoutConfig(
        start_timeout_seconds=_seconds(start, d.start_timeout_seconds),
        stream_timeout_seconds=_seconds(stream, d.stream_timeout_seconds),
        http_timeout_seconds=_seconds(http, d.http_timeout_seconds),
    )


def get_timeout_config() -> TimeoutConfig:
    return _config_for(os.getenv(START_ENV), os.getenv(STREAM_ENV), os.getenv(HTTP_ENV))


def _can_use_alarm() -> bool:
    return hasattr(signal, "setitimer") and threading.current_thread() is threading.main_thread()


@contextmanager
def operation_timeout(seconds: float) -> Iterator[None]:
    """Raise ``TimeoutError`` when the block runs longer than ``seconds``.

    On the main thread of a Unix process the block is interrupted with
    SIGALRM. Elsewhere (FastAPI worker threads) the block runs to completion
    and the overrun is reported on exit. ``seconds <= 0`` disables the guard.
    """
    if seconds <= 0:
        yield
        return
    started = time.monotonic()
    if not _can_use_alarm():
        yield
        if time.monotonic() - started > seconds:
            raise TimeoutError(f"operation exceeded {seconds}s")
        return

    def _on_alarm(signum, frame):  # noqa: ARG001
        raise TimeoutError(f"operation exceeded {seconds}s")

    previous_handler = signal.signal(signal.SIGALRM, _on_alarm)
    previous_delay, previous_interval = signal.setitimer(signal.ITIMER_REAL, seconds)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous_handler)
        if previous_delay > 0:
            # re-arm an enclosing guard with whatever time it has left
            remaining = previous_delay - (time.monotonic() - started)
            signal.setitimer(signal.ITIMER_REAL, max(remaining, 0.001), previous_interval)


__all__ = ["TimeoutConfig", "get_timeout_config", "operation_timeout"]
