"""
Error kinds raised by the stats service and the client-facing sanitizer.

Every error that can end a request is a StatsError. Middleware and services raise
the specific subclass; only the endpoint layer turns them into HTTP responses.

Status mapping:
    ConfigurationError  -> 401 on the auth path, 500 on the service path
    AuthenticationError -> 401
    RateLimitError      -> 429
    ValidationError     -> 400
    ServiceError        -> 500
"""

import logging
from typing import Optional

from dhan_stats.core.config import Settings


logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_MESSAGE = "Server configuration error"
INTERNAL_ERROR_MESSAGE = "An internal error occurred"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class StatsError(Exception):
    """Base class for every error raised by the stats service."""


class ConfigurationError(StatsError):
    """A required configuration value (connection string, admin secret) is missing."""


class AuthenticationError(StatsError):
    """Credentials are missing or do not match the configured admin secret."""


class RateLimitError(StatsError):
    """The client exhausted its request quota for the current window."""

    def __init__(self, message: str, reset_at: float) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class ValidationError(StatsError):
    """A query parameter failed validation. The message names the first failing rule."""


class ServiceError(StatsError):
    """A metrics computation failed (query error, empty aggregate, timeout)."""


class MetricsUnavailableError(ServiceError):
    """An aggregate query returned no rows."""


class ConnectionTimeoutError(ServiceError):
    """No pooled connection became available within the acquire timeout."""


def status_code_for(error: BaseException, auth_path: bool = False) -> int:
    """
    HTTP status for an error that ends a request.

    A ConfigurationError raised while authenticating is a 401; anywhere else it
    is a server failure.
    """
    if isinstance(error, RateLimitError):
        return 429
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, ConfigurationError):
        return 401 if auth_path else 500
    if isinstance(error, ValidationError):
        return 400
    return 500


def sanitize_error(error: BaseException, settings: Optional[Settings] = None) -> str:
    """
    Build the client-visible message for an error that ends a request with 500.

    Configuration problems never reach the client in detail. In production every
    other message is replaced with a generic one so schema and driver details do
    not leak; elsewhere the real message passes through.

    Args:
        error: The exception raised while serving the request.
        settings: Application settings; production mode is read from here.

    Returns:
        The message to place in the response envelope.
    """
    if isinstance(error, ConfigurationError):
        return CONFIGURATION_ERROR_MESSAGE

    if settings is not None and settings.is_production:
        logger.error(f"Internal error: {error!r}")
        return INTERNAL_ERROR_MESSAGE

    message = str(error)
    return message or UNEXPECTED_ERROR_MESSAGE
