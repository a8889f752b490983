"""Pytest fixtures for the policy assistant test suite."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from policy_assistant.base.logging import BASE_LOGGER_NAME, LOG_LEVEL_ENV, get_logger
from policy_assistant.persistence import InMemoryKeyValueStore
from policy_assistant.tests.helpers import FakeEditor


class _EventCapture(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self, name: str | None = None) -> List[Dict[str, Any]]:
        """Decoded JSON payloads, optionally filtered by ``event`` name."""
        out = []
        for record in self.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict) and (name is None or payload.get("event") == name):
                out.append(payload)
        return out


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[_EventCapture]:
    """Capture structured events from the shared ``policy_assistant`` logger.

    The base logger does not propagate to root, so the handler is attached to
    it directly and the level is lowered to DEBUG for the duration of the test.
    """
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    get_logger()
    base = logging.getLogger(BASE_LOGGER_NAME)
    handler = _EventCapture()
    previous = base.level
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)


@pytest.fixture()
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def fake_editor() -> FakeEditor:
    return FakeEditor()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer configuration out of the tests."""
    for name in (
        "POLICY_ASSISTANT_CONFIG_FILE",
        "POLICY_ASSISTANT_API_URL",
        "POLICY_ASSISTANT_API_KEY",
        "OPENAI_API_KEY",
        "POLICY_ASSISTANT_MAX_CONTEXT_CHARS",
        "POLICY_ASSISTANT_DB_PATH",
        "POLICY_ASSISTANT_CORS_ORIGINS",
        "POLICY_ASSISTANT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
