"""
ElementRule: the allowed attribute names for one policy element.

A schema is an ordered tuple of rules with unique element names; validation
iterates it in order, which fixes the order of the emitted diagnostics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class ElementRule:
    """Allow-list entry: ``element_name`` may carry only ``allowed_attributes``."""

    element_name: str
    allowed_attributes: FrozenSet[str]

    def allows(self, attribute_name: str) -> bool:
        return attribute_name in self.allowed_attributes


Schema = Tuple[ElementRule, ...]


__all__ = ["ElementRule", "Schema"]
