"""
Custom exception hierarchy for error categorization and HTTP status mapping.

Distinguishes:
- User errors (400-level): caller sent an invalid mutation
- Server errors (500-level): cache or configuration problems on our side
- External errors (502/503): one of the upstream GraphQL services failed

Usage:
    from hybrid_dashboard.core.exceptions import NetworkError, UpstreamSchemaError

    raise NetworkError("Connection refused", service="primary_api")
    raise UpstreamSchemaError("Cannot query field 'widgets'", service="analytics_api")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    # Default status code (subclasses override)
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., entity_id)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response and structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """Caller provided invalid input (e.g., unknown mutable field, empty id)."""

    status_code = 400
    error_type = "validation_error"


# ===== 500-level: Server Errors =====


class CacheError(AppError):
    """Cache persistence operation failed."""

    status_code = 500
    error_type = "cache_error"


class SerializationError(CacheError):
    """
    Cached data could not be decoded.

    Never escapes the cache store: a read that hits this is reported as a miss.
    """

    error_type = "serialization_error"


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., a fetcher without a client).

    Indicates a deployment mistake, so it is raised immediately and never
    swallowed by the read path.
    """

    status_code = 500
    error_type = "configuration_error"


# ===== 502/503: External Service Errors =====


class ExternalServiceError(AppError):
    """
    Upstream service unavailable or returned an error.

    Maps to 503 Service Unavailable (third-party problem, retry may help).
    """

    status_code = 503
    error_type = "external_service_error"

    def __init__(self, message: str, service: str, **context: Any):
        """
        Initialize with service name for easier debugging.

        Args:
            message: Error description
            service: Service identifier (e.g., "primary_api", "analytics_api")
            **context: Additional context (e.g., status_code)
        """
        super().__init__(message, service=service, **context)
        self.service = service


class NetworkError(ExternalServiceError):
    """Transport-level failure reaching an upstream source."""

    error_type = "network_error"


class UpstreamSchemaError(ExternalServiceError):
    """The upstream answered, but with a GraphQL error payload or unusable data."""

    status_code = 502
    error_type = "upstream_schema_error"
