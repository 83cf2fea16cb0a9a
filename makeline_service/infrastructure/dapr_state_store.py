"""Dapr sidecar state store adapter.

This module implements the StateStorePort against the Dapr sidecar's HTTP
state API. Saves go to ``/v1.0/state/{store}`` and queries to the alpha
query endpoint ``/v1.0-alpha1/state/{store}/query``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..domain.exceptions import StateStoreNotConnectedError, StoreQueryError, StoreWriteError
from ..domain.query import Query
from ..ports.state_store import QueryResponse, StateItem, StateStorePort

logger = logging.getLogger(__name__)

API_TOKEN_HEADER = "dapr-api-token"


class DaprStateStoreAdapter(StateStorePort):
    """State store client talking to a Dapr sidecar over HTTP.

    One ``httpx.AsyncClient`` is opened on ``connect()`` and reused for the
    lifetime of the process. No timeout or retry policy is set here; the
    client library defaults apply.
    """

    def __init__(
        self,
        endpoint: str = "http://localhost:3500",
        api_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Dapr adapter.

        Args:
            endpoint: Base URL of the Dapr sidecar HTTP API
            api_token: Optional Dapr API token
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint.rstrip("/")
        self._api_token = api_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the shared HTTP client."""
        if self._client is not None:
            return
        headers = {API_TOKEN_HEADER: self._api_token} if self._api_token else {}
        self._client = httpx.AsyncClient(
            base_url=self.endpoint, headers=headers, transport=self._transport
        )
        logger.info(f"Created Dapr state store client for {self.endpoint}")

    async def disconnect(self) -> None:
        """Close the shared HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Closed Dapr state store client")

    def _ensure_connected(self, operation: str) -> httpx.AsyncClient:
        if self._client is None:
            raise StateStoreNotConnectedError(operation)
        return self._client

    async def is_healthy(self) -> bool:
        """Check the sidecar health endpoint."""
        if self._client is None:
            return False
        try:
            response = await self._client.get("/v1.0/healthz")
        except httpx.HTTPError as e:
            logger.warning(f"Dapr health check failed: {e}")
            return False
        return response.is_success

    async def save_state(self, store_name: str, key: str, value: dict[str, Any]) -> None:
        """Save a single key through the sidecar."""
        client = self._ensure_connected("save_state")

        try:
            response = await client.post(
                f"/v1.0/state/{store_name}", json=[{"key": key, "value": value}]
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Dapr rejected save of key '{key}' to '{store_name}': "
                f"{e.response.status_code} {e.response.text}"
            )
            raise StoreWriteError(
                f"Failed to save key '{key}': HTTP {e.response.status_code}",
                store_name=store_name,
                key=key,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to save key '{key}' to '{store_name}': {e}")
            raise StoreWriteError(
                f"Failed to save key '{key}': {e}", store_name=store_name, key=key
            ) from e

        logger.debug(f"Saved key '{key}' to store '{store_name}'")

    async def query_state(self, store_name: str, query: Query) -> QueryResponse:
        """Run a query through the sidecar's alpha query API."""
        client = self._ensure_connected("query_state")
        body = query.to_dict()

        try:
            response = await client.post(f"/v1.0-alpha1/state/{store_name}/query", json=body)
            response.raise_for_status()
            payload = response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Dapr rejected query on '{store_name}': "
                f"{e.response.status_code} {e.response.text}"
            )
            raise StoreQueryError(
                f"Query on '{store_name}' failed: HTTP {e.response.status_code}",
                store_name=store_name,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to query '{store_name}': {e}")
            raise StoreQueryError(f"Query on '{store_name}' failed: {e}", store_name=store_name) from e
        except ValueError as e:
            raise StoreQueryError(
                f"Query on '{store_name}' returned invalid JSON: {e}", store_name=store_name
            ) from e

        response_body = _parse_query_response(payload, store_name)
        logger.debug(f"Query on '{store_name}' returned {len(response_body.results)} results")
        return response_body


def _parse_query_response(payload: Any, store_name: str) -> QueryResponse:
    """Map the sidecar's query body to a QueryResponse.

    Raises:
        StoreQueryError: If the body is not a query result object
    """
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(payload, dict) or not isinstance(results or [], list):
        raise StoreQueryError(
            f"Query on '{store_name}' returned an unexpected body: {payload!r}",
            store_name=store_name,
        )

    items = []
    for item in results or []:
        if not isinstance(item, dict):
            raise StoreQueryError(
                f"Query on '{store_name}' returned a malformed result: {item!r}",
                store_name=store_name,
            )
        etag = item.get("etag")
        error = item.get("error")
        items.append(
            StateItem(
                key=str(item.get("key", "")),
                data=item.get("data"),
                etag=str(etag) if etag is not None else None,
                error=str(error) if error else None,
            )
        )

    token = payload.get("token")
    return QueryResponse(results=items, token=str(token) if token else None)
