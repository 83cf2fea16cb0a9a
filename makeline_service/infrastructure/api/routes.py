"""API routes for the makeline service.

This module defines the service-level routes and mounts the order routes,
keeping the web framework concerns separate from the business logic.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ... import __version__
from ...domain.models import HealthStatus, ServiceConfiguration
from ...ports.state_store import StateStorePort
from .dependencies import get_service_configuration, get_state_store
from .order_routes import router as order_router

logger = logging.getLogger(__name__)

SERVICE_NAME = "makeline-service"


class HealthResponse(BaseModel):
    """API response model for health endpoint."""

    status: str
    service: str
    version: str
    state_store_backend: str
    state_store_name: str


# Create router
router = APIRouter()

router.include_router(order_router)
logger.info(f"Included order_router with prefix: {order_router.prefix}")


@router.get("/health", response_model=HealthResponse)
async def health_check(
    config: ServiceConfiguration = Depends(get_service_configuration),  # noqa: B008
    state_store: StateStorePort = Depends(get_state_store),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint with state store status."""
    healthy = await state_store.is_healthy()
    health_status = HealthStatus(
        status="healthy" if healthy else "unhealthy",
        service_name=SERVICE_NAME,
        version=__version__,
        state_store_backend=config.state_store_backend,
        state_store_name=config.state_store_name,
    )
    return HealthResponse(
        status=health_status.status,
        service=health_status.service_name,
        version=health_status.version,
        state_store_backend=health_status.state_store_backend,
        state_store_name=health_status.state_store_name,
    )


@router.get("/ready")
async def readiness_check(
    state_store: StateStorePort = Depends(get_state_store),  # noqa: B008
) -> dict[str, str]:
    """Readiness check endpoint for Kubernetes."""
    if not await state_store.is_healthy():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="State store is not reachable",
        )
    return {"status": "ready"}


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with welcome message."""
    return {"message": f"Welcome to {SERVICE_NAME}", "version": __version__}
