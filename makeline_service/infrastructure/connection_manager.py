"""Connection manager for infrastructure resources.

This module manages the lifecycle of the process-wide state store client,
providing a clean separation between connection management and business logic.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.exceptions import StateStoreError

if TYPE_CHECKING:
    from ..domain.models import ServiceConfiguration
    from ..ports.order_summary_repository import OrderSummaryRepositoryPort
    from ..ports.state_store import StateStorePort

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages infrastructure connections lifecycle."""

    def __init__(self, config: ServiceConfiguration):
        """Initialize the connection manager.

        Args:
            config: Service configuration
        """
        self.config = config
        self._state_store: StateStorePort | None = None
        self._order_repository: OrderSummaryRepositoryPort | None = None

    async def startup(self) -> None:
        """Create the state store client once and build the repository on it."""
        from .factory import InfrastructureFactory

        try:
            logger.info(
                f"Initializing {self.config.state_store_backend} state store client "
                f"for store '{self.config.state_store_name}'..."
            )
            self._state_store = await InfrastructureFactory.create_connected_state_store(
                self.config
            )
            self._order_repository = InfrastructureFactory.create_order_repository(
                self._state_store, self.config
            )
            logger.info("State store client and order repository initialized")
        except Exception as e:
            logger.error(f"Failed to initialize connections: {e}")
            raise StateStoreError(f"Failed to initialize connections: {e}") from e

    async def shutdown(self) -> None:
        """Clean up all connections during application shutdown."""
        try:
            if self._state_store is not None:
                await self._state_store.disconnect()
                logger.info("Disconnected state store client")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")
        finally:
            self._state_store = None
            self._order_repository = None

    @property
    def state_store(self) -> StateStorePort:
        """Get the shared state store client.

        Raises:
            StateStoreError: If not initialized
        """
        if not self._state_store:
            raise StateStoreError("State store not initialized. Call startup() first.")
        return self._state_store

    @property
    def order_repository(self) -> OrderSummaryRepositoryPort:
        """Get the order summary repository.

        Raises:
            StateStoreError: If not initialized
        """
        if not self._order_repository:
            raise StateStoreError("Order repository not initialized. Call startup() first.")
        return self._order_repository


# Global instance managed by the application lifecycle
_connection_manager: ConnectionManager | None = None


def get_connection_manager() -> ConnectionManager:
    """Get the global connection manager instance.

    Raises:
        RuntimeError: If not initialized
    """
    if not _connection_manager:
        raise RuntimeError("Connection manager not initialized")
    return _connection_manager


def set_connection_manager(manager: ConnectionManager | None) -> None:
    """Set (or clear) the global connection manager instance."""
    global _connection_manager
    _connection_manager = manager
