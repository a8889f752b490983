"""policy-assistant command-line interface (package entrypoint).

Argument parsing lives in ``cli_parser`` and subcommand handlers in
``cli_actions``.
"""

from __future__ import annotations

from typing import Optional

from .cli_actions import handle_chat, handle_suggest, handle_validate
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = build_parser().parse_args(argv)
    if args.cmd == "validate":
        return handle_validate(args)
    if args.cmd == "chat":
        return handle_chat(args)
    return handle_suggest(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
