"""Schema construction for attribute validation.

A schema is an ordered tuple of :class:`ElementRule` with unique element
names. It can be built from the built-in policy catalog, from a plain
``{element: [attribute, ...]}`` mapping, or loaded from a JSON/YAML file.

File format (either form)::

    set-header: [name, exists-action]
    rate-limit: [calls, renewal-period]

or::

    - element: set-header
      attributes: [name, exists-action]
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import yaml

from ..base.models import ElementRule, Schema
from .policy_snippets import POLICY_SNIPPETS, PolicySnippet

SchemaSource = Union[Mapping[str, Iterable[str]], Iterable[ElementRule]]


def build_schema(source: SchemaSource) -> Schema:
    """Normalize ``source`` into a :data:`Schema`.

    Raises:
        ValueError: when an element name appears twice or is empty.
    """
    if isinstance(source, Mapping):
        rules = [ElementRule(str(name), frozenset(str(a) for a in attrs)) for name, attrs in source.items()]
    else:
        rules = list(source)
    seen = set()
    for rule in rules:
        if not isinstance(rule, ElementRule):
            raise TypeError(f"schema entries must be ElementRule, got {type(rule).__name__}")
        if not rule.element_name:
            raise ValueError("schema element name must be non-empty")
        if rule.element_name in seen:
            raise ValueError(f"duplicate schema element: {rule.element_name}")
        seen.add(rule.element_name)
    return tuple(rules)


def schema_from_snippets(snippets: Iterable[PolicySnippet]) -> Schema:
    """Build a schema from catalog entries (top-level attributes only)."""
    return build_schema(ElementRule(s.label, frozenset(s.attributes)) for s in snippets)


@lru_cache(maxsize=1)
def default_schema() -> Schema:
    """Schema covering every built-in policy, in catalog order."""
    return schema_from_snippets(POLICY_SNIPPETS)


def _coerce_loaded(data: Any, origin: str) -> Schema:
    if isinstance(data, Mapping):
        for name, attrs in data.items():
            if not isinstance(attrs, (list, tuple)):
                raise ValueError(f"{origin}: attributes for {name!r} must be a list")
        return build_schema(data)
    if isinstance(data, list):
        rules = []
        for entry in data:
            if not isinstance(entry, Mapping) or "element" not in entry:
                raise ValueError(f"{origin}: list entries need an 'element' key")
            rules.append(ElementRule(str(entry["element"]), frozenset(str(a) for a in entry.get("attributes") or ())))
        return build_schema(rules)
    raise ValueError(f"{origin}: schema must be a mapping or a list")


def parse_schema_text(text: str, origin: str = "<schema>") -> Schema:
    """Parse JSON or YAML schema text (YAML is a superset of JSON)."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"{origin}: {exc}") from exc
    return _coerce_loaded(data, origin)


def load_schema_file(path: Union[str, Path]) -> Schema:
    """Load a schema from a JSON or YAML file."""
    p = Path(path)
    return parse_schema_text(p.read_text(encoding="utf-8"), origin=str(p))


__all__ = [
    "SchemaSource",
    "build_schema",
    "schema_from_snippets",
    "default_schema",
    "parse_schema_text",
    "load_schema_file",
]
