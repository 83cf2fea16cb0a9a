"""FastAPI dependency injection setup.

This module configures dependency injection for the FastAPI application,
providing a clean separation between the framework and the application logic.
Uses the InfrastructureFactory pattern for consistent adapter creation.
"""

from __future__ import annotations

from functools import lru_cache

from ...application.order_summary_service import OrderSummaryService
from ...domain.models import ServiceConfiguration
from ...ports.configuration import ConfigurationPort
from ...ports.order_summary_repository import OrderSummaryRepositoryPort
from ...ports.state_store import StateStorePort
from ..factory import InfrastructureFactory


@lru_cache
def get_configuration_port() -> ConfigurationPort:
    """Get the configuration port instance using factory.

    Returns:
        ConfigurationPort: Configuration port implementation
    """
    return InfrastructureFactory.create_configuration_port()


@lru_cache
def get_service_configuration() -> ServiceConfiguration:
    """Get the service configuration.

    Returns:
        ServiceConfiguration: Loaded service configuration
    """
    config_port = get_configuration_port()
    return config_port.load_configuration()


def get_state_store() -> StateStorePort:
    """Get the shared state store client from the connection manager."""
    from ..connection_manager import get_connection_manager

    return get_connection_manager().state_store


def get_order_repository() -> OrderSummaryRepositoryPort:
    """Get the order summary repository from the connection manager."""
    from ..connection_manager import get_connection_manager

    return get_connection_manager().order_repository


def get_order_service() -> OrderSummaryService:
    """Get the order summary application service.

    Returns:
        OrderSummaryService: Application service for order summaries
    """
    return OrderSummaryService(get_order_repository())
