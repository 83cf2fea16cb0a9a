"""NATS JetStream KV state store adapter.

This module implements the StateStorePort on NATS KV buckets. Each state
store name maps to one bucket. NATS KV has no query engine, so queries list
the bucket's keys and evaluate the filter client-side.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

import nats
from nats.js.api import KeyValueConfig
from nats.js.errors import BucketNotFoundError, KeyNotFoundError, NoKeysError

from ..domain.exceptions import (
    InvalidQueryError,
    StateStoreError,
    StateStoreNotConnectedError,
    StoreQueryError,
    StoreWriteError,
)
from ..domain.query import Query
from ..ports.state_store import QueryResponse, StateItem, StateStorePort

if TYPE_CHECKING:
    from nats.aio.client import Client as NATSClient
    from nats.js import JetStreamContext
    from nats.js.kv import KeyValue

logger = logging.getLogger(__name__)

_INVALID_BUCKET_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_VALID_KEY = re.compile(r"^[-/_=.a-zA-Z0-9]+$")


def bucket_name_for(store_name: str) -> str:
    """Map a logical store name to a valid NATS KV bucket name."""
    return _INVALID_BUCKET_CHARS.sub("-", store_name)


class NATSKVStateStoreAdapter(StateStorePort):
    """State store client backed by NATS JetStream Key-Value buckets."""

    def __init__(self, nats_url: str = "nats://localhost:4222", history: int = 1):
        """Initialize the NATS KV adapter.

        Args:
            nats_url: NATS server URL
            history: Revisions kept per key when a bucket is created
        """
        self.nats_url = nats_url
        self._history = history
        self._nc: NATSClient | None = None
        self._js: JetStreamContext | None = None
        self._buckets: dict[str, KeyValue] = {}

    async def connect(self) -> None:
        """Connect to NATS and obtain the JetStream context.

        Raises:
            StateStoreError: If connection fails
        """
        try:
            self._nc = await nats.connect(servers=[self.nats_url])
            self._js = self._nc.jetstream()
            logger.info(f"Connected to NATS at {self.nats_url}")
        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            raise StateStoreError(f"Failed to connect to NATS: {e}") from e

    async def disconnect(self) -> None:
        """Drain and close the NATS connection."""
        self._buckets.clear()
        if self._nc is not None:
            await self._nc.close()
            self._nc = None
            self._js = None
            logger.info("Disconnected from NATS")

    async def is_healthy(self) -> bool:
        return self._nc is not None and self._nc.is_connected

    async def _bucket(self, store_name: str, operation: str) -> KeyValue:
        """Get or create the bucket backing a state store."""
        if self._js is None:
            raise StateStoreNotConnectedError(operation)

        bucket = bucket_name_for(store_name)
        if bucket in self._buckets:
            return self._buckets[bucket]

        try:
            kv = await self._js.key_value(bucket)
            logger.info(f"Connected to existing KV bucket: {bucket}")
        except BucketNotFoundError:
            kv = await self._js.create_key_value(
                KeyValueConfig(
                    bucket=bucket,
                    description=f"State store {store_name}",
                    history=self._history,
                )
            )
            logger.info(f"Created new KV bucket: {bucket}")

        self._buckets[bucket] = kv
        return kv

    async def save_state(self, store_name: str, key: str, value: dict[str, Any]) -> None:
        """Put a JSON value under ``key``."""
        if not _VALID_KEY.match(key):
            raise StoreWriteError(
                f"Key '{key}' is not a valid NATS KV key", store_name=store_name, key=key
            )

        try:
            kv = await self._bucket(store_name, "save_state")
            revision = await kv.put(key, json.dumps(value).encode())
        except StateStoreNotConnectedError:
            raise
        except Exception as e:
            logger.error(f"Failed to put key '{key}' in '{store_name}': {e}")
            raise StoreWriteError(
                f"Failed to put key '{key}': {e}", store_name=store_name, key=key
            ) from e

        logger.debug(f"Stored key '{key}' in '{store_name}' at revision {revision}")

    async def query_state(self, store_name: str, query: Query) -> QueryResponse:
        """Scan the bucket and evaluate the query locally."""
        try:
            kv = await self._bucket(store_name, "query_state")
            try:
                keys = await kv.keys()
            except NoKeysError:
                keys = []

            documents: list[tuple[str, dict[str, Any]]] = []
            revisions: dict[str, int] = {}
            for key in keys:
                try:
                    entry = await kv.get(key)
                except KeyNotFoundError:
                    # Deleted between listing and reading
                    continue
                if not entry.value:
                    continue
                try:
                    documents.append((key, json.loads(entry.value.decode())))
                except (UnicodeDecodeError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping undecodable value for key {key}: {e}")
                    continue
                revisions[key] = entry.revision or 0

            rows, token = query.evaluate(documents)
        except StateStoreNotConnectedError:
            raise
        except InvalidQueryError as e:
            raise StoreQueryError(f"Invalid query: {e.message}", store_name=store_name) from e
        except Exception as e:
            logger.error(f"Failed to query '{store_name}': {e}")
            raise StoreQueryError(f"Query on '{store_name}' failed: {e}", store_name=store_name) from e

        return QueryResponse(
            results=[
                StateItem(key=key, data=document, etag=str(revisions[key])) for key, document in rows
            ],
            token=token,
        )
