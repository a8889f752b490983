"""Compose completion request payloads.

The payload shape is fixed: ``model`` is ``gpt-4``, ``n`` is 1 and
``temperature`` is 0.7. Streamed chat turns use ``max_tokens=500`` and the
chat template; single-shot suggestions use ``max_tokens=100`` and the
suggestion template, and their body carries no ``stream`` field.

Large documents can be condensed before templating with ``max_context_chars``
(0 disables it): the head and tail of the document are kept around an
ellipsis marker, so the result is deterministic.
"""
from __future__ import annotations

from ..base.constants import (
    CHAT_MAX_TOKENS,
    CHOICE_COUNT,
    MODEL,
    SUGGESTION_MAX_TOKENS,
    TEMPERATURE,
)
from ..base.models import Message, RequestPayload
from .prompts import (
    CHAT_SYSTEM_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    format_chat_message,
    format_suggestion_message,
)

ELLIPSIS_MARKER = "\n…\n"


def condense_text_to_limit(text: str, limit: int) -> str:
    """Return ``text`` bounded by ``limit`` characters (head + marker + tail).

    ``limit <= 0`` returns ``text`` unchanged.
    """
    if limit <= 0 or len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS_MARKER):
        return text[:limit]
    budget = limit - len(ELLIPSIS_MARKER)
    head = (budget + 1) // 2
    tail = budget - head
    return text[:head] + ELLIPSIS_MARKER + (text[-tail:] if tail else "")


class CompletionRequestBuilder:
    """Build :class:`RequestPayload` objects for the transport."""

    def __init__(self, *, max_context_chars: int = 0) -> None:
        self._max_context_chars = max(0, int(max_context_chars))

    def build(
        self,
        system_prompt: str,
        user_prompt: str,
        document_context: str,
        streaming: bool,
    ) -> RequestPayload:
        """Compose a payload; ``streaming`` selects the chat or suggestion contract."""
        document = condense_text_to_limit(document_context, self._max_context_chars)
        if streaming:
            content = format_chat_message(user_prompt, document)
            max_tokens = CHAT_MAX_TOKENS
        else:
            content = format_suggestion_message(user_prompt, document)
            max_tokens = SUGGESTION_MAX_TOKENS
        return RequestPayload(
            model=MODEL,
            messages=(
                Message(role="system", content=system_prompt),
                Message(role="user", content=content),
            ),
            max_tokens=max_tokens,
            n=CHOICE_COUNT,
            stream=streaming,
            temperature=TEMPERATURE,
        )

    def build_chat(self, message: str, document: str) -> RequestPayload:
        return self.build(CHAT_SYSTEM_PROMPT, message, document, streaming=True)

    def build_suggestion(self, prompt: str, context: str) -> RequestPayload:
        return self.build(SUGGESTION_SYSTEM_PROMPT, prompt, context, streaming=False)


__all__ = ["CompletionRequestBuilder", "condense_text_to_limit", "ELLIPSIS_MARKER"]
