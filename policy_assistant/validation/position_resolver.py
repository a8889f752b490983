"""Map text anchors and offsets inside a document to 1-based line/column.

Lines are counted by ``\\n`` characters before the offset. The column is the
distance from the preceding ``\\n`` (or from a virtual newline at offset -1),
so the first character of every line is column 1.

Lookups never invent coordinates: a missing anchor or an offset outside the
document raises :class:`AnchorNotFound`.
"""
from __future__ import annotations

from ..base.errors import AnchorNotFound
from ..base.models import Position


def position_at(document: str, offset: int) -> Position:
    """Return the position of ``offset`` (``len(document)`` is the end position)."""
    if offset < 0 or offset > len(document):
        raise AnchorNotFound(f"<offset {offset}>", offset)
    line = document.count("\n", 0, offset) + 1
    column = offset - document.rfind("\n", 0, offset)
    return Position(line=line, column=column, offset=offset)


def locate(document: str, search_anchor: str, search_start_offset: int = 0) -> Position:
    """Position of the first ``search_anchor`` at or after ``search_start_offset``.

    Plain substring search; an empty anchor is never considered found.
    """
    if not search_anchor:
        raise AnchorNotFound(search_anchor, search_start_offset)
    offset = document.find(search_anchor, max(search_start_offset, 0))
    if offset < 0:
        raise AnchorNotFound(search_anchor, search_start_offset)
    return position_at(document, offset)


def locate_column_of(document: str, node_anchor: str, attribute_name: str, search_start_offset: int = 0) -> Position:
    """Position of ``attribute_name`` inside the first occurrence of ``node_anchor``.

    The attribute is searched from the node's offset onward, and the returned
    line is the attribute's own line, which differs from the node's line when
    a start tag spans several lines.
    """
    node = locate(document, node_anchor, search_start_offset)
    return locate(document, attribute_name, node.offset)


__all__ = ["position_at", "locate", "locate_column_of"]
