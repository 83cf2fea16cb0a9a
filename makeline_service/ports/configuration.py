"""Configuration port for the makeline service.

Settings cover the state store backend and name, the Dapr sidecar address
and token, the NATS URL, the query page size and the HTTP/logging basics.
"""

from __future__ import annotations

from typing import Protocol

from ..domain.models import ServiceConfiguration, ValidationResult


class ConfigurationPort(Protocol):
    """Source of the service's ServiceConfiguration."""

    def load_configuration(self) -> ServiceConfiguration:
        """Read and validate the service settings.

        Returns:
            ServiceConfiguration: Settings for the state store client and API

        Raises:
            ConfigurationException: If a setting is malformed or the
                validation result carries an ERROR issue (for example the
                in-memory backend in production)
        """
        ...

    def validate_configuration(self, config: ServiceConfiguration) -> ValidationResult:
        """Check a loaded configuration for unsafe or unused settings.

        Args:
            config: Configuration to check

        Returns:
            ValidationResult: ERROR issues make the configuration unusable;
                WARNING and INFO issues are advisory
        """
        ...
