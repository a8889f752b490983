from __future__ import annotations

import os

import uvicorn

from policy_assistant.config import get_settings


def main() -> None:
    """Start the development server for the policy assistant FastAPI app.

    Host and port come from configuration (``host``/``port``);
    ``POLICY_ASSISTANT_RELOAD=true`` enables auto-reload.
    """
    settings = get_settings()
    reload_enabled = os.getenv("POLICY_ASSISTANT_RELOAD", "false").lower() == "true"
    uvicorn.run(
        "policy_assistant.service.app:app",
        host=settings.host,
        port=settings.port,
        reload=reload_enabled,
    )


if __name__ == "__main__":
    main()
