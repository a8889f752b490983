from __future__ import annotations

import pytest

from policy_assistant.base.models import ElementRule
from policy_assistant.catalog import (
    POLICY_SNIPPETS,
    build_schema,
    default_schema,
    find_snippet,
    load_schema_file,
    parse_schema_text,
    render_policy_reference,
)

EXPECTED_POLICIES = [
    "check-header", "rate-limit", "ip-filter", "quota", "validate-jwt", "choose",
    "mock-response", "retry", "return-response", "send-request", "set-variable",
    "authentication-basic", "authentication-certificate", "cache-store", "cache-lookup",
    "allow-cross-domain-calls", "cors", "json-to-xml", "xml-to-json", "find-and-replace",
    "set-body", "set-header", "set-query-parameter", "rewrite-uri", "validate-content",
    "validate-parameters",
]


def test_catalog_covers_every_builtin_policy():
    assert sorted(s.label for s in POLICY_SNIPPETS) == sorted(EXPECTED_POLICIES)  # nosec B101
    assert [rule.element_name for rule in default_schema()] == [s.label for s in POLICY_SNIPPETS]  # nosec B101


def test_default_schema_uses_top_level_attributes():
    rules = {rule.element_name: rule for rule in default_schema()}
    assert rules["set-header"].allowed_attributes == frozenset({"name", "exists-action"})  # nosec B101
    assert rules["set-header"].allows("name") and not rules["set-header"].allows("value")  # nosec B101
    snippet = find_snippet("rate-limit")
    assert snippet is not None and rules["rate-limit"].allowed_attributes == frozenset(snippet.attributes)  # nosec B101
    assert find_snippet("nope") is None  # nosec B101


def test_build_schema_from_mapping_and_rules():
    schema = build_schema({"a": ["x"], "b": []})
    assert schema == (ElementRule("a", frozenset({"x"})), ElementRule("b", frozenset()))  # nosec B101
    assert build_schema(schema) == schema  # nosec B101


def test_build_schema_rejects_duplicates_and_bad_entries():
    with pytest.raises(ValueError):
        build_schema([ElementRule("a", frozenset()), ElementRule("a", frozenset({"x"}))])
    with pytest.raises(ValueError):
        build_schema({"": ["x"]})
    with pytest.raises(TypeError):
        build_schema(["a"])


def test_parse_schema_text_forms(tmp_path):
    mapping = parse_schema_text("set-header: [name, exists-action]\n")
    listed = parse_schema_text('[{"element": "set-header", "attributes": ["name", "exists-action"]}]')
    assert mapping == listed  # nosec B101
    path = tmp_path / "schema.yaml"
    path.write_text("- element: quota\n  attributes: [calls]\n", encoding="utf-8")
    assert load_schema_file(path) == (ElementRule("quota", frozenset({"calls"})),)  # nosec B101
    with pytest.raises(ValueError):
        parse_schema_text("just a string")
    with pytest.raises(ValueError):
        parse_schema_text("set-header: name")


def test_policy_reference_lines():
    reference = render_policy_reference()
    lines = reference.split("\n")
    assert len(lines) == len(POLICY_SNIPPETS)  # nosec B101
    assert "- set-header - [name, exists-action], {value: []}" in lines  # nosec B101
