"""Domain models for the makeline service.

This module contains the order summary record and the service's
configuration and health value objects, built on Pydantic v2.
Domain models are free from any infrastructure dependencies.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

DEFAULT_STATE_STORE_NAME = "reddog.statestore.orders"


def _parse_timestamp(v: Any) -> datetime | None:
    if v is None or isinstance(v, datetime):
        return v
    if isinstance(v, str):
        # Handle ISO format with Z or timezone
        try:
            return datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid timestamp format: {v}") from e
    raise ValueError(f"Invalid timestamp format: {v}")


class OrderItemSummary(BaseModel):
    """Value object for a single line of an order summary."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    product_id: int | None = Field(None, alias="productId")
    product_name: str | None = Field(None, alias="productName")
    quantity: int = Field(default=0, ge=0)
    unit_cost: float | None = Field(None, alias="unitCost")
    unit_price: float | None = Field(None, alias="unitPrice")
    image_url: str | None = Field(None, alias="imageUrl")


class OrderSummary(BaseModel):
    """The order summary record persisted in the state store.

    ``order_id`` is used verbatim as the state store key. Fields this model
    does not know about are kept, so records written by other services
    round-trip unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    order_id: str = Field(
        ...,
        alias="orderId",
        description="Unique order identifier, used as the store key",
        min_length=1,
    )
    store_id: str = Field(..., alias="storeId", description="Store the order was placed at")
    order_date: datetime | None = Field(None, alias="orderDate")
    order_completed_date: datetime | None = Field(None, alias="orderCompletedDate")
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    loyalty_id: str | None = Field(None, alias="loyaltyId")
    order_items: list[OrderItemSummary] = Field(default_factory=list, alias="orderItems")
    order_total: float | None = Field(None, alias="orderTotal")

    @field_validator("order_date", "order_completed_date", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> datetime | None:
        """Parse timestamp from ISO strings."""
        return _parse_timestamp(v)

    @field_serializer("order_date", "order_completed_date")
    def serialize_datetime(self, value: datetime | None) -> str | None:
        """Serialize datetime to ISO format string."""
        return value.isoformat() if value else None

    @property
    def is_completed(self) -> bool:
        """Whether the order has been marked completed."""
        return self.order_completed_date is not None

    def to_state(self) -> dict[str, Any]:
        """Serialize to the JSON document stored under ``order_id``."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_state(cls, data: dict[str, Any]) -> "OrderSummary":
        """Build an order summary from a stored JSON document."""
        return cls.model_validate(data)

    def mark_completed(self, completed_at: datetime | None = None) -> "OrderSummary":
        """Return a copy stamped with the completion time."""
        return self.model_copy(
            update={"order_completed_date": completed_at or datetime.now(UTC)}
        )


class ValidationLevel(str, Enum):
    """Value object representing validation issue severity levels."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class ValidationIssue(BaseModel):
    """Value object representing a configuration validation issue."""

    level: ValidationLevel = Field(..., description="Issue severity")
    category: str = Field(..., description="Issue category: STORE, CONFIG, etc.")
    message: str = Field(..., description="Human-readable issue description")
    resolution: str | None = Field(None, description="Suggested resolution steps")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional context")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        """Ensure category is uppercase."""
        return v.upper()

    model_config = ConfigDict(frozen=True, strict=True)


class ValidationResult(BaseModel):
    """Aggregate representing the complete validation result."""

    is_valid: bool = Field(default=True, description="Overall validation status")
    context: str = Field(default="", description="Validation context")
    issues: list[ValidationIssue] = Field(default_factory=list, description="All validation issues")
    diagnostics: dict[str, Any] = Field(default_factory=dict, description="Diagnostic information")

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add a validation issue to the result."""
        self.issues.append(issue)
        if issue.level == ValidationLevel.ERROR:
            self.is_valid = False

    def get_issues_by_level(self, level: ValidationLevel) -> list[ValidationIssue]:
        """Get all issues of a specific level."""
        return [issue for issue in self.issues if issue.level == level]

    def has_warnings(self) -> bool:
        return any(issue.level == ValidationLevel.WARNING for issue in self.issues)

    model_config = ConfigDict(strict=True)


class ServiceConfiguration(BaseModel):
    """Domain model for service configuration."""

    model_config = ConfigDict(strict=True, frozen=True)

    state_store_backend: Literal["dapr", "nats", "memory"] = Field(
        default="dapr", description="State store client implementation"
    )
    state_store_name: str = Field(
        default=DEFAULT_STATE_STORE_NAME,
        min_length=1,
        description="Logical name of the order summary state store",
    )
    dapr_http_endpoint: str = Field(
        default="http://localhost:3500", description="Dapr sidecar HTTP endpoint"
    )
    dapr_api_token: str | None = Field(default=None, description="Dapr API token")
    nats_url: str = Field(default="nats://localhost:4222", description="NATS server URL")
    query_page_size: int | None = Field(
        default=None, ge=1, le=10000, description="Page limit for state store queries"
    )
    api_port: int = Field(default=8080, ge=1, le=65535, description="API port number")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )

    @field_validator("dapr_http_endpoint")
    @classmethod
    def validate_dapr_endpoint(cls, v: str) -> str:
        """Validate Dapr endpoint format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Dapr endpoint must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("nats_url")
    @classmethod
    def validate_nats_url(cls, v: str) -> str:
        """Validate NATS URL format."""
        if not v.startswith(("nats://", "tls://")):
            raise ValueError("NATS URL must start with nats:// or tls://")
        return v


class HealthStatus(BaseModel):
    """Domain model representing the health status of the service."""

    model_config = ConfigDict(strict=True, frozen=True)

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    service_name: str = Field(..., min_length=1)
    version: str = Field(..., pattern=r"^\d+\.\d+\.\d+$")
    state_store_backend: str = Field(..., description="Configured state store backend")
    state_store_name: str = Field(..., description="Configured state store name")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
