"""Base shared constants for the completion wire format.

Central location for literals that are part of the compatibility surface with
OpenAI-compatible endpoints: stream framing and fixed request fields.
"""
from __future__ import annotations

# Stream framing
DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

# Fixed request fields
MODEL = "gpt-4"
CHOICE_COUNT = 1
TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 500
SUGGESTION_MAX_TOKENS = 100

# Public endpoint; any other URL is treated as an Azure-style deployment
OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "MODEL",
    "CHOICE_COUNT",
    "TEMPERATURE",
    "CHAT_MAX_TOKENS",
    "SUGGESTION_MAX_TOKENS",
    "OPENAI_CHAT_URL",
]
