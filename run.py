"""Entry point for the Wondrlab CRM API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from the ``API_HOST`` and ``API_PORT`` environment variables (defaults
``0.0.0.0`` and ``8000``); see ``wondrlab_crm/app/core/config.py`` for
the other settings.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from wondrlab_crm.app.core.config import settings
from wondrlab_crm.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("API stopped")
