"""Location-tracking XML scan.

Parses a document with the stdlib expat parser and records, for every start
tag, the character offset of its ``<`` and of each attribute name in source
order. Positions come from the parser itself, so repeated elements and
attributes with identical text are each mapped to their own location.

Expat reports byte offsets into the UTF-8 encoded input; they are converted
back to character offsets of the original ``str``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple
from xml.parsers import expat

from ..base.errors import MalformedDocument

_ATTRIBUTE_RE = re.compile(r"""([^\s=/>"']+)\s*=\s*("[^"]*"|'[^']*')""")
_NAME_END_RE = re.compile(r"[\s/>]")


@dataclass(frozen=True)
class AttributeSpan:
    """An attribute as written in the source (``offset`` is its name's first char)."""

    name: str
    value: str
    offset: int


@dataclass(frozen=True)
class ElementSpan:
    """A start tag (``offset`` is its ``<``) and its attributes in source order."""

    name: str
    offset: int
    attributes: Tuple[AttributeSpan, ...]


class _OffsetMap:
    """UTF-8 byte offset -> character offset."""

    def __init__(self, text: str, data: bytes) -> None:
        self._identity = len(text) == len(data)
        self._table: List[int] = []
        if not self._identity:
            for index, char in enumerate(text):
                self._table.extend([index] * len(char.encode("utf-8", "surrogatepass")))
            self._table.append(len(text))
        self._length = len(text)

    def char_offset(self, byte_offset: int) -> int:
        byte_offset = max(byte_offset, 0)
        if self._identity:
            return min(byte_offset, self._length)
        if byte_offset >= len(self._table):
            return self._length
        return self._table[byte_offset]


def _tag_end(text: str, start: int) -> int:
    """Index of the ``>`` closing the start tag at ``start`` (quotes respected)."""
    quote = ""
    for index in range(start + 1, len(text)):
        char = text[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index
    return len(text)


def _attribute_spans(text: str, tag_offset: int, names: Sequence[str]) -> Tuple[AttributeSpan, ...]:
    end = _tag_end(text, tag_offset)
    name_end = _NAME_END_RE.search(text, tag_offset + 1, end)
    scan_from = name_end.start() if name_end else end
    found = {}
    for match in _ATTRIBUTE_RE.finditer(text, scan_from, end):
        found.setdefault(match.group(1), (match.start(1), match.group(2)[1:-1]))
    spans = []
    for name in names:
        # expat has already rejected duplicate attributes, so names are unique here
        offset, value = found.get(name, (tag_offset, ""))
        spans.append(AttributeSpan(name=name, value=value, offset=offset))
    return tuple(spans)


def scan_elements(text: str) -> List[ElementSpan]:
    """Return every element of ``text`` in document order.

    Raises:
        MalformedDocument: when ``text`` is not well-formed XML; ``offset``
            is the character offset where the parser stopped.
    """
    # lone surrogates pass through as invalid UTF-8, which expat rejects as malformed
    data = text.encode("utf-8", "surrogatepass")
    offsets = _OffsetMap(text, data)
    parser = expat.ParserCreate(encoding="UTF-8")
    parser.ordered_attributes = True
    parser.specified_attributes = True
    elements: List[ElementSpan] = []

    def _start(name: str, attrs: List[str]) -> None:
        tag_offset = offsets.char_offset(parser.CurrentByteIndex)
        names = attrs[0::2]
        elements.append(ElementSpan(name=name, offset=tag_offset, attributes=_attribute_spans(text, tag_offset, names)))

    parser.StartElementHandler = _start
    try:
        parser.Parse(data, True)
    except expat.ExpatError as exc:
        offset = offsets.char_offset(parser.ErrorByteIndex)
        raise MalformedDocument(expat.ErrorString(exc.code), offset=offset, raw=exc) from exc
    return elements


__all__ = ["AttributeSpan", "ElementSpan", "scan_elements"]
