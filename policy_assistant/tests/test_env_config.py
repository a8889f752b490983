from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from policy_assistant.config import AssistantSettings, get_assistant_config, get_settings, load_config_file
from policy_assistant.config.defaults import DEFAULT_API_URL, SERVICE_DEFAULT_PORT
from policy_assistant.config.env import is_placeholder, resolve_api_key


def test_defaults_when_nothing_is_configured():
    cfg = get_assistant_config()
    assert cfg["api_url"] == DEFAULT_API_URL and cfg["api_key"] is None  # nosec B101
    assert cfg["port"] == SERVICE_DEFAULT_PORT  # nosec B101


def test_merge_order_file_then_env_then_overrides(tmp_path, monkeypatch):
    cfg_file = tmp_path / "assistant.yaml"
    cfg_file.write_text("api_url: https://file.example/chat\nmax_context_chars: 100\nunknown: 1\n", encoding="utf-8")
    monkeypatch.setenv("POLICY_ASSISTANT_CONFIG_FILE", str(cfg_file))
    cfg = get_assistant_config()
    assert cfg["api_url"] == "https://file.example/chat" and cfg["max_context_chars"] == 100  # nosec B101
    assert "unknown" not in cfg  # nosec B101

    monkeypatch.setenv("POLICY_ASSISTANT_API_URL", "https://env.example/chat")
    assert get_assistant_config()["api_url"] == "https://env.example/chat"  # nosec B101

    cfg = get_assistant_config({"api_url": "https://override.example/chat", "api_key": None})
    assert cfg["api_url"] == "https://override.example/chat"  # nosec B101


def test_json_config_file(tmp_path):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"port": 9000}), encoding="utf-8")
    assert load_config_file(str(path)) == {"port": 9000}  # nosec B101
    assert load_config_file(str(tmp_path / "missing.json")) == {}  # nosec B101


def test_invalid_config_file_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("a: [1, 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(str(path))


def test_api_key_aliases_and_placeholders(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
    assert resolve_api_key() == "sk-openai"  # nosec B101
    monkeypatch.setenv("POLICY_ASSISTANT_API_KEY", "sk-primary")
    assert resolve_api_key() == "sk-primary"  # nosec B101
    monkeypatch.setenv("POLICY_ASSISTANT_API_KEY", "<your-key>")
    assert resolve_api_key() == "sk-openai"  # nosec B101
    assert is_placeholder("changeme") and not is_placeholder("sk-1") and not is_placeholder(None)  # nosec B101
    assert get_settings().api_key == "sk-openai"  # nosec B101


def test_settings_validation(monkeypatch):
    monkeypatch.setenv("POLICY_ASSISTANT_MAX_CONTEXT_CHARS", "2000")
    assert get_settings().max_context_chars == 2000  # nosec B101
    with pytest.raises(ValidationError):
        AssistantSettings(max_context_chars=-1)
    with pytest.raises(ValidationError):
        AssistantSettings(api_url="  ")
    settings = AssistantSettings(cors_origins="http://a, ,http://b")
    assert settings.cors_origin_list() == ["http://a", "http://b"]  # nosec B101
