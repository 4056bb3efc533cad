"""
FastAPI application entry point for the DhanDiary Stats API.

Builds the application, owns the lifecycle of the shared connection manager and
rate limiter, and mounts the stats router under the configured API prefix.
CORS is answered by the stats routes themselves so that every response,
including rejections, carries the same headers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from dhan_stats import __version__
from dhan_stats.api import api_router
from dhan_stats.core.config import get_settings
from dhan_stats.core.database import ConnectionManager
from dhan_stats.middleware.rate_limit import build_rate_limiter

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    On startup:
        - Create the connection manager (the pool opens on the first query)
        - Create the rate limiter

    On shutdown:
        - Drain the connection pool
        - Close the rate limiter store
    """
    # Startup
    logger.info(f"DhanDiary Stats API starting ({settings.environment})")
    app.state.connection_manager = ConnectionManager(settings)
    app.state.rate_limiter = build_rate_limiter(settings)

    yield

    # Shutdown
    logger.info("DhanDiary Stats API shutting down")
    try:
        await app.state.connection_manager.shutdown()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.error(f"Error closing database pool: {e}")
    try:
        await app.state.rate_limiter.close()
    except Exception as e:
        logger.error(f"Error closing rate limiter: {e}")


# Create FastAPI application
app = FastAPI(
    title="DhanDiary Stats API",
    version=__version__,
    description=(
        "Admin analytics for DhanDiary. Provides user, transaction, financial, "
        "time-series and system health statistics."
    ),
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.api_prefix)


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "dhan_stats.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
