"""
slambase_admin.api.__main__

Entrypoint for running the FastAPI application via `python -m slambase_admin.api`.

Responsibilities:
- Load settings (fails fast when platform configuration is missing).
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from slambase_admin.api.app import create_app
from slambase_admin.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
