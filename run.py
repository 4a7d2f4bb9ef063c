"""Entry point for the Progress Tracker API.

Validates the configuration, builds the application and serves it with
Uvicorn.  Configuration is read from environment variables (see
``progress_tracker_api/app/core/config.py``); the MongoDB connection
variables are required.  If any variable is missing or invalid the
process exits with status 1 after listing every problem.

Usage:
    python run.py
"""
import asyncio
import logging
import sys

from uvicorn import Config, Server

from progress_tracker_api.app.core.config import Settings, load_settings
from progress_tracker_api.app.core.errors import ConfigurationError
from progress_tracker_api.app.main import create_app


async def serve(settings: Settings) -> None:
    """Serve the API on ``0.0.0.0:<PORT>``."""
    app = create_app(settings)
    config = Config(
        app=app,
        host="0.0.0.0",
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR)
        logging.error("Failed to start application: %s", exc)
        return 1
    asyncio.run(serve(settings))
    return 0


if __name__ == "__main__":
    sys.exit(main())
