"""
Pydantic DTOs for chat-completion response bodies.

Purpose
-------
Validate the two inbound shapes the assistant reads:

- a streamed chunk ``{"choices": [{"delta": {"content": "..."}}]}``
- a single-shot response ``{"choices": [{"message": {"content": "..."}}]}``

Either may instead carry ``{"error": {"message": "..."}}``.

Design
------
- Only ``choices[0]`` and ``error`` are read. Unknown fields are ignored,
  later choices are not validated, ``index`` may be anything, and an
  ``error`` that is not an object is kept as its string form.
- Missing optional parts (no ``delta``, ``content: null``) are valid and
  simply carry no text. A payload of the wrong type (a list, a string,
  ``choices`` that is not an array) raises ``pydantic.ValidationError``, which
  the stream accumulator records as a malformed frame.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ErrorBodyDTO(_Lenient):
    """``{"message": ..., "type": ..., "code": ...}`` error object."""

    message: str = ""
    type: Optional[str] = None
    code: Optional[str | int] = None


def _coerce_error(value: Any) -> Any:
    if value is None or isinstance(value, dict):
        return value
    return {"message": str(value)}


def _first_choice_only(value: Any) -> Any:
    return value[:1] if isinstance(value, list) else value


class DeltaDTO(_Lenient):
    role: Optional[str] = None
    content: Optional[str] = None


class StreamChoiceDTO(_Lenient):
    index: Any = None
    delta: Optional[DeltaDTO] = None
    finish_reason: Optional[str] = None


class StreamChunkDTO(_Lenient):
    """One decoded ``data:`` payload of a streamed completion."""

    choices: Annotated[List[StreamChoiceDTO], BeforeValidator(_first_choice_only)] = Field(default_factory=list)
    error: Annotated[Optional[ErrorBodyDTO], BeforeValidator(_coerce_error)] = None

    def first_content(self) -> Optional[str]:
        """Return ``choices[0].delta.content`` when it is a non-empty string."""
        if not self.choices:
            return None
        delta = self.choices[0].delta
        if delta is None or not delta.content:
            return None
        return delta.content


class CompletionMessageDTO(_Lenient):
    role: Optional[str] = None
    content: Optional[str] = None


class CompletionChoiceDTO(_Lenient):
    index: Any = None
    message: Optional[CompletionMessageDTO] = None
    finish_reason: Optional[str] = None


class CompletionResponseDTO(_Lenient):
    """Non-streamed completion body (or an error body)."""

    choices: Annotated[List[CompletionChoiceDTO], BeforeValidator(_first_choice_only)] = Field(default_factory=list)
    error: Annotated[Optional[ErrorBodyDTO], BeforeValidator(_coerce_error)] = None

    def first_content(self) -> Optional[str]:
        """Return ``choices[0].message.content`` stripped, or ``None``."""
        if not self.choices:
            return None
        message = self.choices[0].message
        if message is None or message.content is None:
            return None
        return message.content.strip()


__all__ = [
    "DeltaDTO",
    "StreamChoiceDTO",
    "StreamChunkDTO",
    "ErrorBodyDTO",
    "CompletionMessageDTO",
    "CompletionChoiceDTO",
    "CompletionResponseDTO",
]
