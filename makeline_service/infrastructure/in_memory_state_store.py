"""In-memory implementation of the StateStorePort.

This is an infrastructure adapter that implements the state store port
for testing and local development. Values are stored as JSON copies so
callers cannot mutate stored state through their own references.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..domain.exceptions import (
    InvalidQueryError,
    StateStoreNotConnectedError,
    StoreQueryError,
    StoreWriteError,
)
from ..domain.query import Query
from ..ports.state_store import QueryResponse, StateItem, StateStorePort

logger = logging.getLogger(__name__)


class InMemoryStateStore(StateStorePort):
    """In-memory state store evaluating queries locally."""

    def __init__(self) -> None:
        """Initialize the in-memory storage."""
        # store name -> key -> (serialized value, etag)
        self._stores: dict[str, dict[str, tuple[str, int]]] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info("Using in-memory state store")

    async def disconnect(self) -> None:
        self._connected = False

    async def is_healthy(self) -> bool:
        return self._connected

    async def save_state(self, store_name: str, key: str, value: dict[str, Any]) -> None:
        """Save a JSON copy of ``value``, bumping the key's etag."""
        if not self._connected:
            raise StateStoreNotConnectedError("save_state")
        if not key:
            raise StoreWriteError("State key must not be empty", store_name=store_name, key=key)

        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreWriteError(
                f"Value for key '{key}' is not JSON serializable: {e}",
                store_name=store_name,
                key=key,
            ) from e

        store = self._stores.setdefault(store_name, {})
        _, etag = store.get(key, ("", 0))
        store[key] = (serialized, etag + 1)
        logger.debug(f"Saved key '{key}' in store '{store_name}' (etag {etag + 1})")

    async def query_state(self, store_name: str, query: Query) -> QueryResponse:
        """Filter, sort and page the store's documents locally."""
        if not self._connected:
            raise StateStoreNotConnectedError("query_state")

        store = self._stores.get(store_name, {})
        documents = {key: json.loads(serialized) for key, (serialized, _) in store.items()}

        try:
            rows, token = query.evaluate(documents.items())
        except InvalidQueryError as e:
            raise StoreQueryError(f"Invalid query: {e.message}", store_name=store_name) from e

        return QueryResponse(
            results=[
                StateItem(key=key, data=document, etag=str(store[key][1]))
                for key, document in rows
            ],
            token=token,
        )

    def clear(self) -> None:
        """Clear all stored state (useful for testing)."""
        self._stores.clear()
