"""
Message DTO for the outbound completion request.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """One ``{role, content}`` entry of the ``messages`` array."""

    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


__all__ = ["Message", "Role"]
