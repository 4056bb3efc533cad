"""
Core infrastructure package for the DhanDiary Stats API.

Provides:
- Configuration management via pydantic-settings
- The asyncpg connection manager
- The error hierarchy and client-facing sanitizer

FastAPI dependencies live in dhan_stats.core.dependencies and are imported from
there directly, since they depend on the middleware package.

    from dhan_stats.core import get_settings, ConnectionManager, ServiceError
"""

# =============================================================================
# Re-exports from dhan_stats.core.config
# =============================================================================
from dhan_stats.core.config import Settings, get_settings

# =============================================================================
# Re-exports from dhan_stats.core.errors
# =============================================================================
from dhan_stats.core.errors import (
    StatsError,
    ConfigurationError,
    AuthenticationError,
    RateLimitError,
    ValidationError,
    ServiceError,
    MetricsUnavailableError,
    ConnectionTimeoutError,
    sanitize_error,
    status_code_for,
)

# =============================================================================
# Re-exports from dhan_stats.core.database
# =============================================================================
from dhan_stats.core.database import ConnectionManager


__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Errors (from errors.py)
    'StatsError',
    'ConfigurationError',
    'AuthenticationError',
    'RateLimitError',
    'ValidationError',
    'ServiceError',
    'MetricsUnavailableError',
    'ConnectionTimeoutError',
    'sanitize_error',
    'status_code_for',
    # Database (from database.py)
    'ConnectionManager',
]
