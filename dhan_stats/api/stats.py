"""
FastAPI router module for the admin stats endpoints.

Key Endpoints:
- /stats-global: overview of users, transactions, finances and health
- /stats-users: user totals, activity, growth and churn
- /stats-transactions: transaction volume, backlog and growth
- /stats-finance: financial totals, 12-month trend and currency breakdown
- /stats-timeseries: daily activity, monthly growth, peak day (range/from/to filters)
- /stats-health: pipeline health and estimated database size

Each route answers GET and OPTIONS; other methods get 405. Requests pass
rate limiting and admin authentication (plus filter validation on
/stats-timeseries) before the service runs.
"""

from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import Response

from dhan_stats.api.endpoint import ROUTE_METHODS, handle_stats_request
from dhan_stats.core.config import Settings
from dhan_stats.core.dependencies import (
    ConnectionManagerDep,
    RateLimiterDep,
    SettingsDep,
)
from dhan_stats.middleware.auth import AuthMiddleware
from dhan_stats.middleware.pipeline import Middleware, MiddlewareContext
from dhan_stats.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from dhan_stats.middleware.validation import ValidationMiddleware
from dhan_stats.services import (
    get_financial_metrics,
    get_global_stats,
    get_system_health_metrics,
    get_time_series_stats,
    get_transaction_metrics,
    get_user_metrics,
)


# =============================================================================
# Module Configuration
# =============================================================================

router = APIRouter(tags=["stats"])

# Cache-Control max-age (seconds) per endpoint
CARD_CACHE_MAX_AGE = 60
TIMESERIES_CACHE_MAX_AGE = 300
HEALTH_CACHE_MAX_AGE = 30


def protected(limiter: RateLimiter, settings: Settings) -> List[Middleware]:
    """Rate limit then admin auth, the pipeline shared by every route."""
    return [RateLimitMiddleware(limiter), AuthMiddleware(settings)]


# =============================================================================
# Endpoints
# =============================================================================

@router.api_route("/stats-global", methods=ROUTE_METHODS)
async def stats_global(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    """Dashboard overview."""
    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings),
        fetch=lambda ctx: get_global_stats(db),
        cache_max_age=CARD_CACHE_MAX_AGE,
        label="global",
    )


@router.api_route("/stats-users", methods=ROUTE_METHODS)
async def stats_users(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings),
        fetch=lambda ctx: get_user_metrics(db),
        cache_max_age=CARD_CACHE_MAX_AGE,
        label="user",
    )


@router.api_route("/stats-transactions", methods=ROUTE_METHODS)
async def stats_transactions(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings),
        fetch=lambda ctx: get_transaction_metrics(db),
        cache_max_age=CARD_CACHE_MAX_AGE,
        label="transaction",
    )


@router.api_route("/stats-finance", methods=ROUTE_METHODS)
async def stats_finance(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings),
        fetch=lambda ctx: get_financial_metrics(db),
        cache_max_age=CARD_CACHE_MAX_AGE,
        label="financial",
    )


@router.api_route("/stats-timeseries", methods=ROUTE_METHODS)
async def stats_timeseries(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    """
    Daily activity, monthly growth and peak usage day.

    Query parameters (all optional):
        range: 7d | 30d | 90d | 12m | all
        from / to: YYYY-MM-DD, inclusive

    Filters narrow the fixed 30-day daily and 12-month monthly series; they never
    widen them.
    """
    async def fetch(ctx: MiddlewareContext):
        return await get_time_series_stats(db, ctx.validated_params)

    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings) + [ValidationMiddleware()],
        fetch=fetch,
        cache_max_age=TIMESERIES_CACHE_MAX_AGE,
        label="time series",
    )


@router.api_route("/stats-health", methods=ROUTE_METHODS)
async def stats_health(
    request: Request,
    settings: SettingsDep,
    db: ConnectionManagerDep,
    limiter: RateLimiterDep,
) -> Response:
    return await handle_stats_request(
        request,
        settings=settings,
        middlewares=protected(limiter, settings),
        fetch=lambda ctx: get_system_health_metrics(db),
        cache_max_age=HEALTH_CACHE_MAX_AGE,
        label="system health",
    )
