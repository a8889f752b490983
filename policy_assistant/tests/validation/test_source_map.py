from __future__ import annotations

import pytest

from policy_assistant.base.errors import MalformedDocument
from policy_assistant.validation import scan_elements


def test_elements_and_attributes_in_source_order():
    doc = "<root>\n  <item b='2' a=\"1\"/>\n  <item/>\n</root>"
    elements = scan_elements(doc)
    assert [e.name for e in elements] == ["root", "item", "item"]  # nosec B101
    item = elements[1]
    assert item.offset == doc.index("<item")  # nosec B101
    assert [(a.name, a.value) for a in item.attributes] == [("b", "2"), ("a", "1")]  # nosec B101
    assert item.attributes[0].offset == doc.index("b='2'")  # nosec B101
    assert elements[2].attributes == ()  # nosec B101


def test_greater_than_inside_attribute_value():
    doc = '<root><item expr="a > b" other="x"/></root>'
    (_, item) = scan_elements(doc)
    assert item.attributes[1].offset == doc.index("other")  # nosec B101


def test_character_offsets_with_multibyte_text():
    doc = "<root>ééé<item k='v'/></root>"
    (_, item) = scan_elements(doc)
    assert item.offset == doc.index("<item")  # nosec B101
    assert item.attributes[0].offset == doc.index("k=")  # nosec B101


def test_not_well_formed_raises_with_offset():
    doc = "<root><item></root>"
    with pytest.raises(MalformedDocument) as info:
        scan_elements(doc)
    assert 0 < info.value.offset <= len(doc)  # nosec B101
    assert info.value.message  # nosec B101
