from __future__ import annotations

import time

import pytest

from policy_assistant.base.http import close_all_clients, get_httpx_client
from policy_assistant.base.timeouts import HTTP_ENV, START_ENV, TimeoutConfig, get_timeout_config, operation_timeout


def test_defaults_and_env_overrides(monkeypatch):
    monkeypatch.delenv(START_ENV, raising=False)
    monkeypatch.delenv(HTTP_ENV, raising=False)
    assert get_timeout_config() == TimeoutConfig()  # nosec B101
    monkeypatch.setenv(START_ENV, "5")
    monkeypatch.setenv(HTTP_ENV, "not-a-number")
    cfg = get_timeout_config()
    assert cfg.start_timeout_seconds == 5.0 and cfg.http_timeout_seconds == 30.0  # nosec B101


def test_non_positive_values_fall_back(monkeypatch):
    monkeypatch.setenv(START_ENV, "-1")
    assert get_timeout_config().start_timeout_seconds == 30.0  # nosec B101


def test_operation_timeout_interrupts_long_block():
    with pytest.raises(TimeoutError):
        with operation_timeout(0.05):
            time.sleep(1.0)


def test_operation_timeout_disabled_and_fast_paths():
    with operation_timeout(0):
        pass
    with operation_timeout(5.0):
        pass


def test_client_pool_reuses_per_endpoint_and_purpose():
    try:
        a = get_httpx_client("https://a.example", "stream")
        assert get_httpx_client("https://a.example", "stream") is a  # nosec B101
        assert get_httpx_client("https://a.example", "complete") is not a  # nosec B101
        assert a.timeout.read == get_timeout_config().stream_timeout_seconds  # nosec B101
    finally:
        close_all_clients()
    assert a.is_closed  # nosec B101
