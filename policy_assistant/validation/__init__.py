"""Policy document validation: positions, source spans and attribute checks."""

from .position_resolver import locate, locate_column_of, position_at
from .source_map import AttributeSpan, ElementSpan, scan_elements
from .attribute_validator import AttributeValidator, validate

__all__ = [
    "locate",
    "locate_column_of",
    "position_at",
    "AttributeSpan",
    "ElementSpan",
    "scan_elements",
    "AttributeValidator",
    "validate",
]
