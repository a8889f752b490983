"""CLI parser construction for policy-assistant.

Only argument shapes live here; handlers are in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def add_endpoint_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--api-url``/``--api-key`` overrides for the configured endpoint."""
    parser.add_argument("--api-url", default=None, help="Chat completions endpoint URL")
    parser.add_argument("--api-key", default=None, help="API key (defaults to configuration)")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``validate``, ``chat`` and ``suggest``."""
    p = argparse.ArgumentParser(
        prog="policy-assistant", description="Validate and author API-gateway policy documents"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_val = sub.add_parser("validate", help="Report unknown attributes in a policy document")
    p_val.add_argument("file")
    p_val.add_argument("--schema", default=None, help="JSON or YAML schema file (defaults to the built-in catalog)")
    p_val.add_argument("--sort", action="store_true", help="Order diagnostics by position")
    p_val.add_argument("--json", action="store_true")

    p_chat = sub.add_parser("chat", help="Ask the assistant about a policy document")
    p_chat.add_argument("--file", default=None, help="Policy document sent as context")
    p_chat.add_argument("--message", default=None, help="Question; defaults to a syntax review request")
    p_chat.add_argument("--live", action="store_true", help="Print text as it streams")
    add_endpoint_flags(p_chat)

    p_sug = sub.add_parser("suggest", help="Request an inline suggestion at a cursor position")
    p_sug.add_argument("--file", required=True)
    p_sug.add_argument("--line", type=int, required=True)
    p_sug.add_argument("--column", type=int, required=True)
    p_sug.add_argument("--json", action="store_true")
    add_endpoint_flags(p_sug)

    return p
