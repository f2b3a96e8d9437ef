"""
moviebase.api.__main__

Entrypoint for running the FastAPI application via `python -m moviebase.api`
(or the `moviebase-api` console script).

Responsibilities:
- Load settings; an unusable signing secret stops the process before it serves.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import sys

import uvicorn
from pydantic import ValidationError

from moviebase.api.app import create_app
from moviebase.settings import get_settings


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        sys.exit(f"moviebase: invalid configuration\n{e}")

    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
