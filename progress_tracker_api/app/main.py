"""
Main entrypoint for the Progress Tracker API.

This module assembles the FastAPI application: it sets up logging,
middleware, error handlers and routers, and wires the storage layer.
Settings are validated first, so a misconfigured process stops before
anything else happens.  Run it with uvicorn's factory mode, e.g.::

    uvicorn progress_tracker_api.app.main:create_app --factory

or through ``run.py`` at the project root.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router as api_router
from .core.config import Settings, load_settings
from .core.db import get_client, get_tasks_collection, init_db
from .core.errors import ApiError, api_error_handler
from .core.logging_config import setup_logging
from .middleware.request_logging import RequestLoggingMiddleware
from .repositories.mongo_task_repository import MongoTaskRepository
from .repositories.task_repository import TaskRepository
from .services.provider import AppContext, ServiceProvider


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[TaskRepository] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Application settings.  Loaded (and validated) from the
        environment when omitted.
    repository : Optional[TaskRepository]
        Storage to use.  When omitted a MongoDB client is created from
        ``settings``; the connection is checked and indexes are created
        when the application starts, and the client is closed on
        shutdown.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.

    Raises
    ------
    ConfigurationError
        If ``settings`` is omitted and the environment is invalid.
    """
    if settings is None:
        settings = load_settings()

    # Initialise logging before anything else so that the wiring below
    # can log.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        description="API for managing tasks and progress tracking",
    )

    origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps everything, CORS responses included.
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)

    client = None
    if repository is None:
        client = get_client(settings)
        collection = get_tasks_collection(client, settings)
        repository = MongoTaskRepository(collection)

    app.state.settings = settings
    app.state.context = AppContext(task_repository=repository)
    app.state.service_provider = ServiceProvider()

    app.include_router(api_router)

    if client is not None:

        @app.on_event("startup")
        async def startup_event() -> None:
            # Fails startup if MongoDB is unreachable.
            init_db(collection)

        @app.on_event("shutdown")
        async def shutdown_event() -> None:
            client.close()
            logger.info("MongoDB client closed")

    logger.info(
        "%s %s configured (environment=%s)",
        settings.project_name,
        settings.api_version,
        settings.environment,
    )
    return app
