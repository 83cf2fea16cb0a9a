"""Port for order summary repository operations.

This module defines the interface for order summary storage operations,
following the repository pattern for clean separation of concerns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import OrderSummary


class OrderSummaryRepositoryPort(Protocol):
    """Protocol interface for order summary repository operations."""

    async def save_order(self, order: OrderSummary) -> OrderSummary:
        """Save an order summary under its order id.

        Saving with an existing order id replaces the stored value.

        Args:
            order: The order summary to store

        Returns:
            The same order summary that was passed in

        Raises:
            StoreWriteError: If the write fails
        """
        ...

    async def get_orders_for_store(self, store_id: str) -> list[OrderSummary]:
        """Retrieve all order summaries of a store.

        Args:
            store_id: The store identifier

        Returns:
            A new list of matching order summaries, in store order

        Raises:
            StoreQueryError: If the query fails
        """
        ...

    async def find_all_by_store_id(self, store_id: str) -> list[OrderSummary]:
        """Retrieve all order summaries of a store.

        Same semantics as ``get_orders_for_store``.
        """
        ...

    async def find_by_order_id_and_store_id(
        self, order_id: str, store_id: str
    ) -> OrderSummary | None:
        """Retrieve the order summary matching both an order id and a store id.

        Args:
            order_id: The order identifier
            store_id: The store identifier

        Returns:
            The first matching order summary, or None if nothing matches

        Raises:
            StoreQueryError: If the query fails
        """
        ...

    async def find_by_order_id(self, order_id: str) -> list[OrderSummary]:
        """Retrieve all order summaries with an order id.

        Args:
            order_id: The order identifier

        Returns:
            Matching order summaries; empty when none exist

        Raises:
            StoreQueryError: If the query fails
        """
        ...
