"""Infrastructure factory for creating adapters and dependencies.

This module follows the Factory pattern to centralize the creation of
infrastructure components, promoting loose coupling and testability.
"""

from __future__ import annotations

from ..domain.exceptions import ConfigurationException
from ..domain.models import ServiceConfiguration
from ..ports.configuration import ConfigurationPort
from ..ports.order_summary_repository import OrderSummaryRepositoryPort
from ..ports.state_store import StateStorePort
from .configuration_adapter import EnvironmentConfigurationAdapter
from .dapr_state_store import DaprStateStoreAdapter
from .in_memory_state_store import InMemoryStateStore
from .nats_kv_state_store import NATSKVStateStoreAdapter
from .order_summary_repository_adapter import OrderSummaryRepositoryAdapter


class InfrastructureFactory:
    """Factory for creating infrastructure adapters following hexagonal architecture."""

    @staticmethod
    def create_configuration_port() -> ConfigurationPort:
        """Create a configuration port adapter.

        Returns:
            ConfigurationPort implementation
        """
        return EnvironmentConfigurationAdapter()

    @staticmethod
    def create_state_store(config: ServiceConfiguration) -> StateStorePort:
        """Create the (not yet connected) state store client for the configured backend.

        Args:
            config: Service configuration

        Returns:
            StateStorePort implementation

        Raises:
            ConfigurationException: If the backend is unknown
        """
        if config.state_store_backend == "dapr":
            return DaprStateStoreAdapter(config.dapr_http_endpoint, config.dapr_api_token)
        if config.state_store_backend == "nats":
            return NATSKVStateStoreAdapter(config.nats_url)
        if config.state_store_backend == "memory":
            return InMemoryStateStore()
        raise ConfigurationException(f"Unknown state store backend: {config.state_store_backend}")

    @staticmethod
    async def create_connected_state_store(config: ServiceConfiguration) -> StateStorePort:
        """Create and connect the state store client."""
        state_store = InfrastructureFactory.create_state_store(config)
        await state_store.connect()
        return state_store

    @staticmethod
    def create_order_repository(
        state_store: StateStorePort, config: ServiceConfiguration
    ) -> OrderSummaryRepositoryPort:
        """Create an order summary repository adapter.

        Args:
            state_store: Connected state store client
            config: Service configuration

        Returns:
            OrderSummaryRepositoryPort implementation
        """
        return OrderSummaryRepositoryAdapter(
            state_store,
            store_name=config.state_store_name,
            page_size=config.query_page_size,
        )
