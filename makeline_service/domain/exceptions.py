"""Domain exceptions for the makeline service.

Custom exceptions that represent domain-specific errors.
"""


class DomainException(Exception):
    """Base exception for all domain-related errors."""

    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigurationException(DomainException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


class InvalidQueryError(DomainException):
    """Raised when a state store query cannot be built."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_QUERY")


class OrderNotFoundError(DomainException):
    """Raised when no order summary matches an order id and store id."""

    def __init__(self, order_id: str, store_id: str | None = None):
        if store_id is None:
            message = f"Order '{order_id}' not found"
        else:
            message = f"Order '{order_id}' not found in store '{store_id}'"
        super().__init__(message, "ORDER_NOT_FOUND")
        self.order_id = order_id
        self.store_id = store_id


class StateStoreError(DomainException):
    """Raised when a state store operation fails."""

    def __init__(
        self,
        message: str,
        store_name: str | None = None,
        key: str | None = None,
        error_code: str = "STATE_STORE_ERROR",
    ):
        super().__init__(message, error_code)
        self.store_name = store_name
        self.key = key


class StoreWriteError(StateStoreError):
    """Raised when saving state fails (connectivity, timeout or rejection)."""

    def __init__(self, message: str, store_name: str | None = None, key: str | None = None):
        super().__init__(message, store_name=store_name, key=key, error_code="STORE_WRITE_ERROR")


class StoreQueryError(StateStoreError):
    """Raised when querying state fails."""

    def __init__(self, message: str, store_name: str | None = None):
        super().__init__(message, store_name=store_name, error_code="STORE_QUERY_ERROR")


class StateStoreNotConnectedError(StateStoreError):
    """Raised when a state store client is used before it is connected."""

    def __init__(self, operation: str):
        super().__init__(
            f"State store not connected (operation: {operation})",
            error_code="STATE_STORE_NOT_CONNECTED",
        )
        self.operation = operation
