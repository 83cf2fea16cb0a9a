"""Application service for order summaries.

This module implements the use cases of the make line: recording incoming
order summaries, listing a store's orders and completing orders. It
coordinates between the HTTP layer and the repository port.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from ..domain.exceptions import OrderNotFoundError

if TYPE_CHECKING:
    from ..domain.models import OrderSummary
    from ..ports.order_summary_repository import OrderSummaryRepositoryPort

logger = logging.getLogger(__name__)


class OrderSummaryService:
    """Service for recording and querying order summaries."""

    def __init__(self, repository: OrderSummaryRepositoryPort):
        """Initialize the order summary service.

        Args:
            repository: The order summary repository
        """
        self._repository = repository

    async def record_order(self, order: OrderSummary) -> OrderSummary:
        """Store an order summary, replacing any summary with the same order id.

        Raises:
            StoreWriteError: If the write fails
        """
        saved = await self._repository.save_order(order)
        logger.info(f"Recorded order {order.order_id} for store {order.store_id}")
        return saved

    async def list_orders_for_store(self, store_id: str) -> list[OrderSummary]:
        """List all order summaries of a store.

        Raises:
            StoreQueryError: If the query fails
        """
        orders = await self._repository.get_orders_for_store(store_id)
        logger.info(f"Listed {len(orders)} orders for store {store_id}")
        return orders

    async def get_order(self, store_id: str, order_id: str) -> OrderSummary:
        """Get one order summary of a store.

        Raises:
            OrderNotFoundError: If the store has no such order
            StoreQueryError: If the query fails
        """
        order = await self._repository.find_by_order_id_and_store_id(order_id, store_id)
        if order is None:
            raise OrderNotFoundError(order_id, store_id)
        return order

    async def find_orders_by_order_id(self, order_id: str) -> list[OrderSummary]:
        """Find all order summaries stored under an order id, in any store."""
        return await self._repository.find_by_order_id(order_id)

    async def complete_order(
        self, store_id: str, order_id: str, completed_at: datetime | None = None
    ) -> OrderSummary:
        """Mark an order completed and save it.

        Completing an already completed order keeps its original completion time.

        Raises:
            OrderNotFoundError: If the store has no such order
            StoreQueryError: If the lookup fails
            StoreWriteError: If the write fails
        """
        order = await self.get_order(store_id, order_id)
        if order.is_completed:
            logger.info(f"Order {order_id} for store {store_id} already completed")
            return order

        completed = order.mark_completed(completed_at)
        await self._repository.save_order(completed)
        logger.info(f"Completed order {order_id} for store {store_id}")
        return completed
