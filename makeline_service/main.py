"""Main entry point for the makeline service.

This module sets up the FastAPI application using hexagonal architecture,
with clear separation between framework concerns and business logic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .infrastructure.api.dependencies import get_service_configuration
from .infrastructure.api.error_handlers import register_error_handlers
from .infrastructure.api.routes import router
from .infrastructure.connection_manager import (
    ConnectionManager,
    get_connection_manager,
    set_connection_manager,
)

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan manager.

    Creates the process-wide state store client on startup and closes it
    on shutdown.
    """
    logger.info("Starting makeline service")

    try:
        config = get_service_configuration()

        logger.info(f"Service configured for environment: {config.environment}")
        logger.info(
            f"State store: {config.state_store_backend} backend, store '{config.state_store_name}'"
        )
        logger.info(f"API Port: {config.api_port}")

        connection_manager = ConnectionManager(config)
        await connection_manager.startup()
        set_connection_manager(connection_manager)

        logger.info("Service is ready to handle requests")

        yield

    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        raise
    finally:
        logger.info("Shutting down makeline service")

        try:
            manager = get_connection_manager()
        except RuntimeError:
            manager = None
        if manager is not None:
            await manager.shutdown()
            set_connection_manager(None)


app = FastAPI(
    title="Makeline Service",
    description="Order summary queue for the make line, kept in a state store",
    version=__version__,
    lifespan=lifespan,
)

# Register error handlers
register_error_handlers(app)

# Include routes from the infrastructure layer
app.include_router(router)


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    port = int(os.getenv("API_PORT", "8080"))
    uvicorn.run("makeline_service.main:app", host="0.0.0.0", port=port)  # nosec B104
