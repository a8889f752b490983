"""Allow-list attribute validation for policy documents.

Purpose
-------
Report every attribute that is not declared for its element in the schema.
No other structural check is made: unknown elements, missing attributes and
nesting are not validated.

Ordering
--------
Diagnostics come out in schema-entry order, then element document order,
then attribute source order. ``sort_diagnostics`` gives position order.

Failure modes
-------------
- Not well-formed XML: exactly one ``Malformed document: ...`` diagnostic at
  the parser's error position; attribute checks are skipped for that pass.
- A diagnostic whose position cannot be resolved is dropped and logged.

Validation is pure: the same ``(text, schema)`` always yields equal output.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from ..base.errors import AnchorNotFound, MalformedDocument
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import Diagnostic, Schema, Severity, sort_diagnostics
from ..catalog.schema import SchemaSource, build_schema, default_schema
from .position_resolver import locate, position_at
from .source_map import ElementSpan, scan_elements

UNKNOWN_ATTRIBUTE_MESSAGE = "Unknown attribute: {name}"
MALFORMED_DOCUMENT_MESSAGE = "Malformed document: {reason}"


class AttributeValidator:
    """Validate documents against one schema."""

    def __init__(self, schema: Optional[SchemaSource] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self._schema: Schema = default_schema() if schema is None else build_schema(schema)
        self._logger = logger or get_logger("policy_assistant.validation")
        self._ctx = LogContext(component="validation")

    @property
    def schema(self) -> Schema:
        return self._schema

    def validate(self, document_text: str, *, sort: bool = False) -> List[Diagnostic]:
        """Return the diagnostics for ``document_text``.

        Empty or whitespace-only text yields no diagnostics.
        """
        if not document_text.strip():
            return []
        try:
            elements = scan_elements(document_text)
        except MalformedDocument as exc:
            return [self._malformed(document_text, exc)]

        by_name: Dict[str, List[ElementSpan]] = defaultdict(list)
        for element in elements:
            by_name[element.name].append(element)

        diagnostics: List[Diagnostic] = []
        for rule in self._schema:
            for element in by_name.get(rule.element_name, ()):
                for attribute in element.attributes:
                    if rule.allows(attribute.name):
                        continue
                    diagnostic = self._unknown_attribute(document_text, attribute.name, attribute.offset)
                    if diagnostic is not None:
                        diagnostics.append(diagnostic)

        log_event(
            self._logger,
            "validation.pass",
            self._ctx,
            level=logging.DEBUG,
            elements=len(elements),
            diagnostics=len(diagnostics),
        )
        return sort_diagnostics(diagnostics) if sort else diagnostics

    def _unknown_attribute(self, text: str, name: str, offset: int) -> Optional[Diagnostic]:
        try:
            start = locate(text, name, offset)
        except AnchorNotFound as exc:
            log_event(
                self._logger,
                "validation.anchor_not_found",
                self._ctx,
                level=logging.WARNING,
                error_code=exc.code.value,
                anchor=name,
                offset=offset,
            )
            return None
        return Diagnostic(
            severity=Severity.ERROR,
            message=UNKNOWN_ATTRIBUTE_MESSAGE.format(name=name),
            start_line=start.line,
            start_column=start.column,
            end_line=start.line,
            end_column=start.column + len(name),
        )

    def _malformed(self, text: str, exc: MalformedDocument) -> Diagnostic:
        start = position_at(text, min(max(exc.offset, 0), len(text)))
        log_event(
            self._logger,
            "validation.malformed_document",
            self._ctx,
            level=logging.DEBUG,
            error_code=exc.code.value,
            reason=exc.message,
            line=start.line,
            column=start.column,
        )
        return Diagnostic(
            severity=Severity.ERROR,
            message=MALFORMED_DOCUMENT_MESSAGE.format(reason=exc.message),
            start_line=start.line,
            start_column=start.column,
            end_line=start.line,
            end_column=start.column + 1,
        )


def validate(document_text: str, schema: Optional[SchemaSource] = None) -> List[Diagnostic]:
    """Validate ``document_text`` against ``schema`` (built-in catalog when omitted)."""
    return AttributeValidator(schema).validate(document_text)


__all__ = [
    "AttributeValidator",
    "validate",
    "UNKNOWN_ATTRIBUTE_MESSAGE",
    "MALFORMED_DOCUMENT_MESSAGE",
]
