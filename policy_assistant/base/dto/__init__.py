"""Pydantic DTOs for inbound completion payloads."""

from .completion import (
    DeltaDTO,
    StreamChoiceDTO,
    StreamChunkDTO,
    ErrorBodyDTO,
    CompletionMessageDTO,
    CompletionChoiceDTO,
    CompletionResponseDTO,
)

__all__ = [
    "DeltaDTO",
    "StreamChoiceDTO",
    "StreamChunkDTO",
    "ErrorBodyDTO",
    "CompletionMessageDTO",
    "CompletionChoiceDTO",
    "CompletionResponseDTO",
]
