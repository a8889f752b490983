"""
Diagnostic DTO pushed to the editor surface as a marker.

Each validation pass produces a fresh list that replaces the previous one;
diagnostics carry no identity across passes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List


class Severity(str, Enum):
    """Marker severity."""

    ERROR = "Error"
    WARNING = "Warning"


@dataclass(frozen=True)
class Diagnostic:
    """A positioned validation message.

    Attributes:
        severity: :class:`Severity` of the marker.
        message: Human-readable text, e.g. ``"Unknown attribute: bad"``.
        start_line: 1-based line of the first character.
        start_column: 1-based column of the first character.
        end_line: 1-based line of the end position.
        end_column: 1-based column just past the last character.
    """

    severity: Severity
    message: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def to_marker(self) -> Dict[str, Any]:
        """Return the camelCase marker shape editor surfaces consume."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "startLineNumber": self.start_line,
            "startColumn": self.start_column,
            "endLineNumber": self.end_line,
            "endColumn": self.end_column,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Return diagnostics stably sorted by start position."""
    return sorted(diagnostics, key=lambda d: (d.start_line, d.start_column))


__all__ = ["Severity", "Diagnostic", "sort_diagnostics"]
