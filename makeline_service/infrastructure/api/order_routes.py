"""API routes for order summaries on the make line.

This module defines the order endpoints, delegating to the application
service. Domain exceptions are mapped to HTTP responses by the
centralized error handlers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from ...application.order_summary_service import OrderSummaryService
from ...domain.models import OrderSummary
from .dependencies import get_order_service

# Create router
router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderSummary, status_code=status.HTTP_201_CREATED)
async def save_order(
    order: OrderSummary,
    response: Response,
    service: OrderSummaryService = Depends(get_order_service),  # noqa: B008
) -> OrderSummary:
    """Save an order summary, replacing any summary with the same order id."""
    saved = await service.record_order(order)
    response.headers["Location"] = f"/orders/{saved.store_id}/{saved.order_id}"
    return saved


@router.get("", response_model=list[OrderSummary])
async def find_orders_by_order_id(
    order_id: str = Query(..., alias="orderId", min_length=1),  # noqa: B008
    service: OrderSummaryService = Depends(get_order_service),  # noqa: B008
) -> list[OrderSummary]:
    """Find all order summaries stored under an order id."""
    return await service.find_orders_by_order_id(order_id)


@router.get("/{store_id}", response_model=list[OrderSummary])
async def list_orders_for_store(
    store_id: str,
    service: OrderSummaryService = Depends(get_order_service),  # noqa: B008
) -> list[OrderSummary]:
    """List all order summaries of a store."""
    return await service.list_orders_for_store(store_id)


@router.get("/{store_id}/{order_id}", response_model=OrderSummary)
async def get_order(
    store_id: str,
    order_id: str,
    service: OrderSummaryService = Depends(get_order_service),  # noqa: B008
) -> OrderSummary:
    """Get one order summary of a store."""
    return await service.get_order(store_id, order_id)


@router.post("/{store_id}/{order_id}/complete", response_model=OrderSummary)
async def complete_order(
    store_id: str,
    order_id: str,
    service: OrderSummaryService = Depends(get_order_service),  # noqa: B008
) -> OrderSummary:
    """Mark an order completed."""
    return await service.complete_order(store_id, order_id)
