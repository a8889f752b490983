"""
Position value object.

A resolved location inside a document snapshot: 1-based ``line`` and
``column`` plus the 0-based character ``offset`` it was derived from.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """1-based line/column of a character offset within a document."""

    line: int
    column: int
    offset: int


__all__ = ["Position"]
