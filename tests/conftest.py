"""Shared pytest fixtures for makeline-service tests."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from makeline_service.domain.models import OrderSummary
from makeline_service.infrastructure.in_memory_state_store import InMemoryStateStore
from makeline_service.infrastructure.order_summary_repository_adapter import (
    OrderSummaryRepositoryAdapter,
)
from makeline_service.ports.state_store import QueryResponse, StateStorePort

STORE_NAME = "reddog.statestore.orders"


@pytest.fixture
def sample_order_data():
    """Order summary document as stored in the state store."""
    return {
        "orderId": "9d6bd4d0-6a9d-4b86-9c7e-0d9f1c7a3a11",
        "orderDate": "2024-05-01T10:15:00+00:00",
        "orderCompletedDate": None,
        "storeId": "Redmond",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "loyaltyId": "42",
        "orderItems": [
            {
                "productId": 1,
                "productName": "Latte",
                "quantity": 2,
                "unitCost": 1.25,
                "unitPrice": 4.5,
                "imageUrl": "https://example.com/latte.png",
            }
        ],
        "orderTotal": 9.0,
    }


@pytest.fixture
def sample_order(sample_order_data):
    """Order summary domain object."""
    return OrderSummary.from_state(sample_order_data)


@pytest.fixture
def mock_state_store():
    """Mock state store client for testing."""
    mock = AsyncMock(spec=StateStorePort)
    mock.query_state.return_value = QueryResponse()
    mock.is_healthy.return_value = True
    return mock


@pytest_asyncio.fixture
async def memory_store():
    """Connected in-memory state store."""
    store = InMemoryStateStore()
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
def memory_repository(memory_store):
    """Order summary repository backed by the in-memory state store."""
    return OrderSummaryRepositoryAdapter(memory_store, store_name=STORE_NAME)
