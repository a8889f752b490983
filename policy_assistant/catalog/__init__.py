"""Policy catalog: built-in policy snippets and validation schemas."""

from .policy_snippets import PolicySnippet, POLICY_SNIPPETS, find_snippet, render_policy_reference
from .schema import (
    build_schema,
    default_schema,
    load_schema_file,
    parse_schema_text,
    schema_from_snippets,
)

__all__ = [
    "PolicySnippet",
    "POLICY_SNIPPETS",
    "find_snippet",
    "render_policy_reference",
    "build_schema",
    "default_schema",
    "load_schema_file",
    "parse_schema_text",
    "schema_from_snippets",
]
