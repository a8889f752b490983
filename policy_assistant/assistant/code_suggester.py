"""Inline code suggestions at the cursor.

The text of the current line up to the cursor is the prompt prefix; fewer
than three characters means no request is made. The prompt sent to the
endpoint embeds the full document, the code within five lines of the cursor,
the neighbouring lines and the policy catalog. The reply is offered as a
single snippet completion inserted at the cursor.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..base.errors import AssistantError
from ..base.logging import LogContext, get_logger, log_event
from .prompts import SUGGESTION_SYSTEM_PROMPT, format_suggestion_prompt
from .request_builder import CompletionRequestBuilder
from .transport import CompletionTransport

MIN_PREFIX_CHARS = 3
SURROUNDING_LINES = 5


@dataclass(frozen=True)
class CompletionItem:
    """A suggestion to insert at ``line``/``column`` (1-based)."""

    label: str
    insert_text: str
    line: int
    column: int
    kind: str = "snippet"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind,
            "insertText": self.insert_text,
            "range": {
                "startLineNumber": self.line,
                "startColumn": self.column,
                "endLineNumber": self.line,
                "endColumn": self.column,
            },
        }


def _line_at(lines: List[str], line: int) -> str:
    return lines[line - 1] if 1 <= line <= len(lines) else ""


class CodeSuggester:
    """Request single-shot suggestions for a cursor position."""

    def __init__(
        self,
        transport: CompletionTransport,
        builder: Optional[CompletionRequestBuilder] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._transport = transport
        self._builder = builder or CompletionRequestBuilder()
        self._logger = logger or get_logger("policy_assistant.suggest")
        self._ctx = LogContext(component="suggest")
        self.last_error: Optional[AssistantError] = None

    @staticmethod
    def text_until_position(document: str, line: int, column: int) -> str:
        """Text of ``line`` before ``column``.

        Raises:
            ValueError: when ``line`` or ``column`` is below 1 or ``line`` is
                past the end of the document.
        """
        lines = document.split("\n")
        if line < 1 or line > len(lines) or column < 1:
            raise ValueError(f"position {line}:{column} is outside the document")
        return lines[line - 1][: column - 1]

    @staticmethod
    def surrounding_code(document: str, line: int) -> str:
        lines = document.split("\n")
        start = max(1, line - SURROUNDING_LINES)
        end = min(len(lines), line + SURROUNDING_LINES)
        return "\n".join(lines[start - 1 : end])

    def build_prompt(self, document: str, line: int, column: int) -> str:
        lines = document.split("\n")
        return format_suggestion_prompt(
            prefix=self.text_until_position(document, line, column),
            document=document,
            surrounding_code=self.surrounding_code(document, line),
            previous_line=_line_at(lines, line - 1),
            next_line=_line_at(lines, line + 1),
        )

    def suggest(self, document: str, line: int, column: int) -> Optional[str]:
        """Return the suggested text, or ``None`` when the prefix is too short.

        Raises:
            TransportFailure: when the endpoint fails or reports an error.
        """
        prefix = self.text_until_position(document, line, column)
        if len(prefix) < MIN_PREFIX_CHARS:
            return None
        payload = self._builder.build(SUGGESTION_SYSTEM_PROMPT, self.build_prompt(document, line, column), document, streaming=False)
        t0 = time.perf_counter()
        log_event(self._logger, "suggest.start", self._ctx, line=line, column=column, prefix_chars=len(prefix))
        text = self._transport.complete(payload)
        log_event(
            self._logger,
            "suggest.end",
            self._ctx,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
            chars=len(text) if text else 0,
        )
        return text

    def provide_completion_items(self, document: str, line: int, column: int) -> List[CompletionItem]:
        """Completion items for the cursor; failures are logged and yield ``[]``."""
        self.last_error = None
        try:
            text = self.suggest(document, line, column)
        except AssistantError as exc:
            self.last_error = exc
            log_event(
                self._logger,
                "suggest.error",
                self._ctx,
                level=logging.WARNING,
                error_code=exc.code.value,
                message=exc.message,
            )
            return []
        if not text:
            return []
        return [CompletionItem(label=text, insert_text=text, line=line, column=column)]


__all__ = ["CodeSuggester", "CompletionItem", "MIN_PREFIX_CHARS", "SURROUNDING_LINES"]
