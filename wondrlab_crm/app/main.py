"""
Main entrypoint for the Wondrlab CRM API.

This module assembles the FastAPI application, sets up logging and
CORS, and includes the versioned routers.  The ``create_app``
function builds and configures the app, which is then instantiated at
module import time as ``app``::

    uvicorn wondrlab_crm.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.dependencies import get_store
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open the store at startup so pending migrations run before the
    # first request.  Dependency overrides (tests) take precedence.
    store_factory = app.dependency_overrides.get(get_store, get_store)
    store_factory()
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield
    logger.info("%s shutting down", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the modules
    # below log with the configured format and level.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
