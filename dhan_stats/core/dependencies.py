"""
FastAPI dependency injection module for the DhanDiary Stats API.

The connection manager and rate limiter are built once by the application
lifespan and stored on app.state; these dependencies hand them to the route
handlers so tests can swap them through app.dependency_overrides.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_connection_manager: Returns the ConnectionManager on app.state
- get_rate_limiter: Returns the RateLimiter on app.state
- SettingsDep / ConnectionManagerDep / RateLimiterDep: Annotated aliases

Usage Examples:
    @router.get("/stats-users")
    async def stats_users(
        request: Request,
        settings: SettingsDep,
        db: ConnectionManagerDep,
        limiter: RateLimiterDep,
    ) -> Response:
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from dhan_stats.core.config import Settings, get_settings
from dhan_stats.core.database import ConnectionManager
from dhan_stats.middleware.rate_limit import RateLimiter


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    Thin wrapper around get_settings() so tests can do:

        app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    """
    return get_settings()


# =============================================================================
# Application State Dependencies
# =============================================================================

def get_connection_manager(request: Request) -> ConnectionManager:
    """Return the ConnectionManager created by the application lifespan."""
    return request.app.state.connection_manager


def get_rate_limiter(request: Request) -> RateLimiter:
    """Return the RateLimiter created by the application lifespan."""
    return request.app.state.rate_limiter


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

ConnectionManagerDep = Annotated[ConnectionManager, Depends(get_connection_manager)]

RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
