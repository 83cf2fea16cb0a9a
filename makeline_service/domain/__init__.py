"""Domain layer - Order summary model, query value objects and exceptions."""

from .exceptions import (
    ConfigurationException,
    DomainException,
    InvalidQueryError,
    OrderNotFoundError,
    StateStoreError,
    StateStoreNotConnectedError,
    StoreQueryError,
    StoreWriteError,
)
from .models import OrderItemSummary, OrderSummary, ServiceConfiguration
from .query import AndFilter, EqFilter, InFilter, OrFilter, Pagination, Query, Sorting

__all__ = [
    "AndFilter",
    "ConfigurationException",
    "DomainException",
    "EqFilter",
    "InFilter",
    "InvalidQueryError",
    "OrFilter",
    "OrderItemSummary",
    "OrderNotFoundError",
    "OrderSummary",
    "Pagination",
    "Query",
    "ServiceConfiguration",
    "Sorting",
    "StateStoreError",
    "StateStoreNotConnectedError",
    "StoreQueryError",
    "StoreWriteError",
]
