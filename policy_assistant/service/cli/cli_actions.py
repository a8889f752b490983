"""CLI subcommand handlers.

Each handler takes the parsed ``argparse.Namespace`` and returns a process
exit code. Errors are written to stderr as one JSON object; results go to
stdout.

Exit codes
----------
- ``0``: success (``validate``: no diagnostics)
- ``1``: ``validate`` found diagnostics, or the endpoint reported an error
- ``2``: unreadable input file, bad schema or invalid arguments
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ...assistant import ChatSession, CodeSuggester, CompletionRequestBuilder, CompletionTransport
from ...base.errors import AssistantError
from ...base.logging import LogContext, get_logger, log_event
from ...catalog import load_schema_file
from ...config import get_settings
from ...config.defaults import DEFAULT_POLICY_DOCUMENT
from ...validation import AttributeValidator

logger = get_logger("policy_assistant.cli")


def _emit_error(message: str, code: Optional[str] = None, err: TextIO = sys.stderr) -> None:
    payload: Dict[str, Any] = {"error": message}
    if code:
        payload["error_code"] = code
    err.write(json.dumps(payload) + "\n")


def _read_document(path: Optional[str]) -> str:
    return Path(path).read_text(encoding="utf-8") if path else DEFAULT_POLICY_DOCUMENT


def build_transport(args: argparse.Namespace) -> tuple[CompletionTransport, CompletionRequestBuilder]:
    """Transport and builder from configuration plus ``--api-url``/``--api-key``."""
    settings = get_settings({"api_url": args.api_url, "api_key": args.api_key})
    return (
        CompletionTransport(settings.api_url, settings.api_key),
        CompletionRequestBuilder(max_context_chars=settings.max_context_chars),
    )


def handle_validate(args: argparse.Namespace, out: TextIO = sys.stdout) -> int:
    try:
        text = Path(args.file).read_text(encoding="utf-8")
        schema = load_schema_file(args.schema) if args.schema else None
        validator = AttributeValidator(schema)
    except (OSError, TypeError, ValueError) as e:
        _emit_error(str(e))
        return 2
    diagnostics = validator.validate(text, sort=args.sort)
    if args.json:
        out.write(json.dumps({"ok": not diagnostics, "diagnostics": [d.to_dict() for d in diagnostics]}, indent=2) + "\n")
    else:
        for d in diagnostics:
            out.write(f"{args.file}:{d.start_line}:{d.start_column}: {d.severity.value}: {d.message}\n")
    log_event(logger, "cli.validate", LogContext(component="cli"), file=args.file, diagnostics=len(diagnostics))
    return 1 if diagnostics else 0


def handle_chat(
    args: argparse.Namespace,
    transport: Optional[CompletionTransport] = None,
    out: TextIO = sys.stdout,
) -> int:
    """Run one chat turn; ``--live`` prints deltas as they arrive."""
    try:
        document = _read_document(args.file)
    except OSError as e:
        _emit_error(str(e))
        return 2
    builder = CompletionRequestBuilder()
    if transport is None:
        transport, builder = build_transport(args)
    session = ChatSession(transport, builder)

    def _on_delta(delta: str, _text: str) -> None:
        out.write(delta)
        out.flush()

    on_delta = _on_delta if args.live else None
    try:
        if args.message:
            result = session.send(args.message, document, on_delta)
        else:
            result = session.propose_fix(document, on_delta)
    except AssistantError as e:
        _emit_error(e.message, e.code.value)
        return 2
    if args.live:
        out.write("\n")
    else:
        out.write(result.text + "\n")
    if not result.ok:
        _emit_error(result.error or result.finish_reason)
        return 1
    return 0


def handle_suggest(
    args: argparse.Namespace,
    transport: Optional[CompletionTransport] = None,
    out: TextIO = sys.stdout,
) -> int:
    try:
        document = Path(args.file).read_text(encoding="utf-8")
    except OSError as e:
        _emit_error(str(e))
        return 2
    builder = CompletionRequestBuilder()
    if transport is None:
        transport, builder = build_transport(args)
    suggester = CodeSuggester(transport, builder)
    try:
        items = suggester.provide_completion_items(document, args.line, args.column)
    except ValueError as e:
        _emit_error(str(e))
        return 2
    if suggester.last_error is not None:
        _emit_error(suggester.last_error.message, suggester.last_error.code.value)
        return 1
    if args.json:
        out.write(json.dumps([item.to_dict() for item in items], indent=2) + "\n")
    else:
        for item in items:
            out.write(item.insert_text + "\n")
    return 0


__all__ = ["build_transport", "handle_chat", "handle_suggest", "handle_validate"]
