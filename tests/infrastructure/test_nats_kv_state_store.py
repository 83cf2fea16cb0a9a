"""Unit tests for the NATS KV state store adapter."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from nats.js.errors import BucketNotFoundError, KeyNotFoundError, NoKeysError

from makeline_service.domain.exceptions import (
    StateStoreError,
    StateStoreNotConnectedError,
    StoreQueryError,
    StoreWriteError,
)
from makeline_service.domain.query import Query, Sorting, all_of, eq
from makeline_service.infrastructure.nats_kv_state_store import (
    NATSKVStateStoreAdapter,
    bucket_name_for,
)

STORE = "reddog.statestore.orders"


def create_kv_entry(data, revision=1):
    """Helper to create a mock KV entry."""
    entry = MagicMock()
    entry.value = json.dumps(data).encode() if data is not None else None
    entry.revision = revision
    return entry


@pytest.fixture
def mock_kv():
    kv = AsyncMock()
    kv.put.return_value = 1
    kv.keys.side_effect = NoKeysError()
    return kv


@pytest.fixture
def mock_nc(mock_kv):
    nc = MagicMock()
    nc.is_connected = True
    nc.close = AsyncMock()
    js = MagicMock()
    js.key_value = AsyncMock(return_value=mock_kv)
    js.create_key_value = AsyncMock(return_value=mock_kv)
    nc.jetstream.return_value = js
    return nc


@pytest_asyncio.fixture
async def adapter(mock_nc):
    with patch(
        "makeline_service.infrastructure.nats_kv_state_store.nats.connect",
        AsyncMock(return_value=mock_nc),
    ):
        store = NATSKVStateStoreAdapter("nats://localhost:4222")
        await store.connect()
    return store


def test_bucket_name_for_replaces_invalid_characters():
    assert bucket_name_for("reddog.statestore.orders") == "reddog-statestore-orders"
    assert bucket_name_for("orders_v2") == "orders_v2"


class TestNATSKVStateStoreAdapter:
    @pytest.mark.asyncio
    async def test_not_connected(self):
        store = NATSKVStateStoreAdapter()

        assert not await store.is_healthy()
        with pytest.raises(StateStoreNotConnectedError):
            await store.save_state(STORE, "o1", {"orderId": "o1"})
        with pytest.raises(StateStoreNotConnectedError):
            await store.query_state(STORE, Query())

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        with patch(
            "makeline_service.infrastructure.nats_kv_state_store.nats.connect",
            AsyncMock(side_effect=OSError("no servers available")),
        ):
            store = NATSKVStateStoreAdapter()
            with pytest.raises(StateStoreError, match="Failed to connect to NATS"):
                await store.connect()

    @pytest.mark.asyncio
    async def test_save_state_puts_json(self, adapter, mock_nc, mock_kv):
        await adapter.save_state(STORE, "o1", {"orderId": "o1", "storeId": "s1"})

        mock_nc.jetstream.return_value.key_value.assert_awaited_once_with(
            "reddog-statestore-orders"
        )
        key, payload = mock_kv.put.await_args.args
        assert key == "o1"
        assert json.loads(payload.decode()) == {"orderId": "o1", "storeId": "s1"}

    @pytest.mark.asyncio
    async def test_bucket_created_when_missing(self, adapter, mock_nc):
        js = mock_nc.jetstream.return_value
        js.key_value.side_effect = BucketNotFoundError()

        await adapter.save_state(STORE, "o1", {"orderId": "o1"})

        js.create_key_value.assert_awaited_once()
        config = js.create_key_value.await_args.args[0]
        assert config.bucket == "reddog-statestore-orders"

    @pytest.mark.asyncio
    async def test_bucket_is_cached(self, adapter, mock_nc):
        await adapter.save_state(STORE, "o1", {"orderId": "o1"})
        await adapter.save_state(STORE, "o2", {"orderId": "o2"})

        assert mock_nc.jetstream.return_value.key_value.await_count == 1

    @pytest.mark.asyncio
    async def test_save_state_invalid_key(self, adapter):
        with pytest.raises(StoreWriteError, match="not a valid NATS KV key"):
            await adapter.save_state(STORE, "order 1", {"orderId": "order 1"})

    @pytest.mark.asyncio
    async def test_save_state_failure(self, adapter, mock_kv):
        mock_kv.put.side_effect = TimeoutError("nats: timeout")

        with pytest.raises(StoreWriteError) as exc_info:
            await adapter.save_state(STORE, "o1", {"orderId": "o1"})

        assert exc_info.value.key == "o1"

    @pytest.mark.asyncio
    async def test_query_empty_bucket(self, adapter):
        response = await adapter.query_state(STORE, Query(filter=eq("orderId", "o1")))

        assert response.results == []
        assert response.token is None

    @pytest.mark.asyncio
    async def test_query_filters_client_side(self, adapter, mock_kv):
        documents = {
            "o1": {"orderId": "o1", "storeId": "s1"},
            "o2": {"orderId": "o2", "storeId": "s2"},
            "o3": {"orderId": "o3", "storeId": "s1"},
        }
        mock_kv.keys.side_effect = None
        mock_kv.keys.return_value = list(documents)
        mock_kv.get.side_effect = lambda key: create_kv_entry(documents[key], revision=7)

        response = await adapter.query_state(
            STORE, Query(filter=all_of(eq("storeId", "s1"), eq("orderId", "o3")))
        )

        assert [item.key for item in response.results] == ["o3"]
        assert response.results[0].data == documents["o3"]
        assert response.results[0].etag == "7"

    @pytest.mark.asyncio
    async def test_query_skips_deleted_and_undecodable_entries(self, adapter, mock_kv):
        broken = MagicMock()
        broken.value = b"not json"
        not_utf8 = MagicMock()
        not_utf8.value = b"\xff\xfe"
        entries = {
            "o1": create_kv_entry({"orderId": "o1", "storeId": "s1"}),
            "o2": broken,
            "o4": create_kv_entry(None),
            "o5": not_utf8,
        }

        async def get(key):
            if key == "o3":
                raise KeyNotFoundError()
            return entries[key]

        mock_kv.keys.side_effect = None
        mock_kv.keys.return_value = ["o1", "o2", "o3", "o4", "o5"]
        mock_kv.get.side_effect = get

        response = await adapter.query_state(STORE, Query(filter=eq("storeId", "s1")))

        assert [item.key for item in response.results] == ["o1"]

    @pytest.mark.asyncio
    async def test_query_invalid_sort(self, adapter, mock_kv):
        documents = {"a": {"v": 1}, "b": {"v": "x"}}
        mock_kv.keys.side_effect = None
        mock_kv.keys.return_value = list(documents)
        mock_kv.get.side_effect = lambda key: create_kv_entry(documents[key])

        with pytest.raises(StoreQueryError, match="Invalid query"):
            await adapter.query_state(STORE, Query(sort=(Sorting("v"),)))

    @pytest.mark.asyncio
    async def test_query_failure(self, adapter, mock_kv):
        mock_kv.keys.side_effect = ConnectionResetError("connection lost")

        with pytest.raises(StoreQueryError, match="connection lost"):
            await adapter.query_state(STORE, Query())

    @pytest.mark.asyncio
    async def test_disconnect(self, adapter, mock_nc):
        assert await adapter.is_healthy()

        await adapter.disconnect()

        mock_nc.close.assert_awaited_once()
        assert not await adapter.is_healthy()
