"""Port interface for the generic state store client.

This module defines the abstract interface for saving and querying named
state stores, following hexagonal architecture principles. Store names are
passed per call; values are JSON documents.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..domain.query import Query


class StateItem(BaseModel):
    """A single ``(key, value)`` pair returned by a state store query."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="State key")
    data: Any = Field(None, description="Decoded JSON value")
    etag: str | None = Field(None, description="Store-assigned version tag")
    error: str | None = Field(None, description="Per-item error reported by the store")


class QueryResponse(BaseModel):
    """The result page of a state store query."""

    model_config = ConfigDict(frozen=True)

    results: list[StateItem] = Field(default_factory=list)
    token: str | None = Field(None, description="Continuation token for the next page")


class StateStorePort(ABC):
    """Abstract interface for state store operations."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection to the state store.

        Raises:
            StateStoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection to the state store."""
        pass

    @abstractmethod
    async def is_healthy(self) -> bool:
        """Check whether the state store is reachable.

        Returns:
            True if the store answers, False otherwise
        """
        pass

    @abstractmethod
    async def save_state(self, store_name: str, key: str, value: dict[str, Any]) -> None:
        """Save a value under a key, replacing any previous value.

        Args:
            store_name: Name of the state store
            key: The state key
            value: JSON-serializable document

        Raises:
            StoreWriteError: If the write fails, times out or is rejected
        """
        pass

    @abstractmethod
    async def query_state(self, store_name: str, query: Query) -> QueryResponse:
        """Query a state store with a filter.

        Args:
            store_name: Name of the state store
            query: Filter, sort and page to apply

        Returns:
            QueryResponse with the matching items and an optional continuation token

        Raises:
            StoreQueryError: If the query fails
        """
        pass
