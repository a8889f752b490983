"""Architecture enforcement tests for import boundaries.

The core layers (``base``, ``catalog``, ``validation``, ``assistant``,
``editor``, ``persistence``) must not depend on the presentation layer
(``policy_assistant.service``) or on the web stack it uses. The scan is
static to avoid import-time side effects.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pytest

CORE_PACKAGES = ("base", "catalog", "validation", "assistant", "editor", "persistence", "config")

FORBIDDEN_SNIPPETS = (
    "from policy_assistant.service",
    "import policy_assistant.service",
    "from ..service",
    "from ...service",
    "import fastapi",
    "from fastapi",
    "import uvicorn",
)


def _iter_python_files(root: Path) -> Iterable[Path]:
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts:
            continue
        yield path


def test_core_layers_do_not_import_service_layer() -> None:
    """Fail with the offending files when a core module reaches outward."""
    package_root = Path(__file__).resolve().parent.parent / "policy_assistant"
    if not package_root.is_dir():
        pytest.skip("policy_assistant package not found; skipping boundary check")

    offenders: List[str] = []
    for name in CORE_PACKAGES:
        for py in _iter_python_files(package_root / name):
            src = py.read_text(encoding="utf-8", errors="replace")
            offenders.extend(f"{py}: contains '{s}'" for s in FORBIDDEN_SNIPPETS if s in src)

    if offenders:
        pytest.fail("Core layers must not import the service layer.\n" + "\n".join(offenders))
