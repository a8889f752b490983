"""Fields shared by every event of one unit of work."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LogContext:
    """Component name plus optional chat turn and request ids.

    ``to_dict`` flattens ``extra`` into the top level and drops ``None``.
    """

    component: Optional[str] = None
    turn_id: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        out |= self.extra
        return {k: v for k, v in out.items() if v is not None}


__all__ = ["LogContext"]
