"""Adapter implementation for the order summary repository.

This module implements the OrderSummaryRepositoryPort on top of the generic
state store port. Each operation becomes one save or one query (one per page
when paging is configured) against a single configured store; results are
unwrapped into OrderSummary records.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..domain.models import DEFAULT_STATE_STORE_NAME, OrderSummary
from ..domain.query import AndFilter, EqFilter, Filter, Pagination, Query
from ..ports.order_summary_repository import OrderSummaryRepositoryPort

if TYPE_CHECKING:
    from ..ports.state_store import StateItem, StateStorePort

logger = logging.getLogger(__name__)

ORDER_ID_FIELD = "orderId"
STORE_ID_FIELD = "storeId"


class OrderSummaryRepositoryAdapter(OrderSummaryRepositoryPort):
    """Repository for order summaries kept in a state store.

    The store client is shared and long-lived; this adapter holds no mutable
    state between calls. Store errors are not caught here and reach the
    caller unchanged.
    """

    def __init__(
        self,
        state_store: StateStorePort,
        store_name: str = DEFAULT_STATE_STORE_NAME,
        page_size: int | None = None,
    ):
        """Initialize the repository adapter.

        Args:
            state_store: Connected state store client
            store_name: Name of the state store holding order summaries
            page_size: Optional page limit; when set, queries follow
                continuation tokens until the store reports no more pages
        """
        self._state_store = state_store
        self._store_name = store_name
        self._page_size = page_size

    @property
    def store_name(self) -> str:
        return self._store_name

    async def save_order(self, order: OrderSummary) -> OrderSummary:
        """Save an order summary under its order id and return it unchanged."""
        await self._state_store.save_state(self._store_name, order.order_id, order.to_state())
        logger.info(f"Saved order {order.order_id} for store {order.store_id}")
        return order

    async def get_orders_for_store(self, store_id: str) -> list[OrderSummary]:
        return list(await self.find_all_by_store_id(store_id))

    async def find_all_by_store_id(self, store_id: str) -> list[OrderSummary]:
        return await self._find_by_field(STORE_ID_FIELD, store_id)

    async def find_by_order_id_and_store_id(
        self, order_id: str, store_id: str
    ) -> OrderSummary | None:
        """Return the first order matching both ids, or None."""
        orders = await self._find(
            AndFilter((EqFilter(ORDER_ID_FIELD, order_id), EqFilter(STORE_ID_FIELD, store_id)))
        )
        if not orders:
            logger.debug(f"No order {order_id} found for store {store_id}")
            return None
        if len(orders) > 1:
            logger.warning(
                f"Found {len(orders)} orders matching order {order_id} in store {store_id}, "
                "returning the first"
            )
        return orders[0]

    async def find_by_order_id(self, order_id: str) -> list[OrderSummary]:
        return await self._find_by_field(ORDER_ID_FIELD, order_id)

    async def _find_by_field(self, field_name: str, value: str) -> list[OrderSummary]:
        orders = await self._find(EqFilter(field_name, value))
        logger.info(f"Retrieved {len(orders)} orders with {field_name}={value}")
        return orders

    async def _find(self, query_filter: Filter) -> list[OrderSummary]:
        """Run a filtered query, following pages, and unwrap the results."""
        page = Pagination(limit=self._page_size) if self._page_size else None
        query = Query(filter=query_filter, page=page)

        orders: list[OrderSummary] = []
        seen_tokens: set[str] = set()
        while True:
            response = await self._state_store.query_state(self._store_name, query)
            for item in response.results:
                order = self._translate_to_domain_model(item)
                if order is not None:
                    orders.append(order)

            if page is None or not response.token or response.token in seen_tokens:
                break
            seen_tokens.add(response.token)
            query = query.with_token(response.token)

        return orders

    def _translate_to_domain_model(self, item: StateItem) -> OrderSummary | None:
        """Decode one query result, skipping items that are not order summaries."""
        if item.error:
            logger.warning(f"Store reported error for key {item.key}: {item.error}")
            return None

        data: Any = item.data
        try:
            if isinstance(data, bytes):
                data = json.loads(data.decode())
            elif isinstance(data, str):
                data = json.loads(data)
            return OrderSummary.from_state(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse order summary for key {item.key}: {e}")
            return None
