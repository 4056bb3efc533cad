"""
API package initialization.

This package contains the FastAPI router for the admin stats endpoints:
- stats: the six /stats-* routes
- endpoint: shared OPTIONS/405/middleware/service request handling
"""

from fastapi import APIRouter

from dhan_stats.api.stats import router as stats_router

# Create main API router
api_router = APIRouter()

api_router.include_router(stats_router)

__all__ = [
    "api_router",
    "stats_router",
]
