"""Configuration adapter implementation.

Concrete implementation of the ConfigurationPort interface.
Loads configuration from environment variables.
"""

from __future__ import annotations

import os
from typing import Literal, cast

from ..domain.exceptions import ConfigurationException
from ..domain.models import (
    DEFAULT_STATE_STORE_NAME,
    ServiceConfiguration,
    ValidationIssue,
    ValidationLevel,
    ValidationResult,
)
from ..ports.configuration import ConfigurationPort

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ENVIRONMENTS = ["development", "staging", "production"]
BACKENDS = ["dapr", "nats", "memory"]


class EnvironmentConfigurationAdapter(ConfigurationPort):
    """Adapter that loads configuration from environment variables."""

    def load_configuration(self) -> ServiceConfiguration:
        """Load service configuration from environment variables.

        Returns:
            ServiceConfiguration: Validated configuration

        Raises:
            ConfigurationException: If configuration is invalid
        """
        try:
            dapr_host = os.getenv("DAPR_HOST", "localhost")
            dapr_http_port = os.getenv("DAPR_HTTP_PORT", "3500")

            backend = os.getenv("STATE_STORE_BACKEND", "dapr").lower()
            store_name = os.getenv("STATE_STORE_NAME", DEFAULT_STATE_STORE_NAME)
            dapr_endpoint = os.getenv("DAPR_HTTP_ENDPOINT", f"http://{dapr_host}:{dapr_http_port}")
            dapr_api_token = os.getenv("DAPR_API_TOKEN") or None
            nats_url = os.getenv("NATS_URL", "nats://localhost:4222")
            page_size_value = os.getenv("QUERY_PAGE_SIZE", "")
            api_port = int(os.getenv("API_PORT", "8080"))
            log_level = os.getenv("LOG_LEVEL", "INFO").upper()
            environment = os.getenv("ENVIRONMENT", "development").lower()

            if backend not in BACKENDS:
                raise ValueError(f"Invalid state store backend: {backend}")

            if log_level not in LOG_LEVELS:
                raise ValueError(f"Invalid log level: {log_level}")

            if environment not in ENVIRONMENTS:
                raise ValueError(f"Invalid environment: {environment}")

            query_page_size = int(page_size_value) if page_size_value else None

            config = ServiceConfiguration(
                state_store_backend=cast(Literal["dapr", "nats", "memory"], backend),
                state_store_name=store_name,
                dapr_http_endpoint=dapr_endpoint,
                dapr_api_token=dapr_api_token,
                nats_url=nats_url,
                query_page_size=query_page_size,
                api_port=api_port,
                log_level=cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level),
                environment=cast(Literal["development", "staging", "production"], environment),
            )

            validation_result = self.validate_configuration(config)
            if not validation_result.is_valid:
                error_messages = [
                    issue.message
                    for issue in validation_result.get_issues_by_level(ValidationLevel.ERROR)
                ]
                raise ConfigurationException(
                    f"Configuration validation failed: {'; '.join(error_messages)}"
                )
            return config

        except ConfigurationException:
            raise
        except Exception as e:
            raise ConfigurationException(f"Failed to load configuration: {str(e)}") from e

    def validate_configuration(self, config: ServiceConfiguration) -> ValidationResult:
        """Validate a configuration object.

        Args:
            config: Configuration to validate

        Returns:
            ValidationResult: Result with validation status and any issues
        """
        result = ValidationResult(context="ServiceConfiguration")

        if config.environment == "production" and config.state_store_backend == "memory":
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.ERROR,
                    category="STORE",
                    message="Production environment cannot use the in-memory state store",
                    resolution="Set STATE_STORE_BACKEND to dapr or nats",
                    details={"backend": config.state_store_backend},
                )
            )

        if config.state_store_backend == "dapr" and config.query_page_size is None:
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.INFO,
                    category="STORE",
                    message="No query page size set; the sidecar returns all matches in one page",
                )
            )

        if config.state_store_backend != "dapr" and config.dapr_api_token:
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.WARNING,
                    category="CONFIG",
                    message="DAPR_API_TOKEN is set but the Dapr backend is not in use",
                    resolution="Unset DAPR_API_TOKEN or set STATE_STORE_BACKEND=dapr",
                )
            )

        # Add diagnostic information
        result.diagnostics["environment"] = config.environment
        result.diagnostics["state_store_backend"] = config.state_store_backend
        result.diagnostics["state_store_name"] = config.state_store_name
        result.diagnostics["api_port"] = config.api_port

        return result
