"""Ports layer - Interfaces for external communication."""

from .configuration import ConfigurationPort
from .order_summary_repository import OrderSummaryRepositoryPort
from .state_store import QueryResponse, StateItem, StateStorePort

__all__ = [
    "ConfigurationPort",
    "OrderSummaryRepositoryPort",
    "QueryResponse",
    "StateItem",
    "StateStorePort",
]
