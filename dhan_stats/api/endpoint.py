"""
Shared request handling for the stats endpoints.

Every stats route follows the same sequence:

    OPTIONS                  -> 204, empty body, CORS headers, no checks
    any method other than GET -> 405 Method not allowed
    middleware short-circuit -> 429 / 401 / 400
    service success          -> 200 with data, timestamp and Cache-Control
    service failure          -> 500 with a sanitized message

Every response carries the CORS headers.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from fastapi import Request
from fastapi.responses import Response
from pydantic import BaseModel

from dhan_stats.core.config import Settings
from dhan_stats.core.errors import ServiceError, sanitize_error, status_code_for
from dhan_stats.middleware.cors import CorsPolicy
from dhan_stats.middleware.pipeline import (
    Middleware,
    MiddlewareContext,
    ShortCircuit,
    run_middleware,
)
from dhan_stats.models.schemas import StatsResponse
from dhan_stats.services.global_stats import utc_timestamp


logger = logging.getLogger(__name__)

# Every method registered on the stats routes; all but GET and OPTIONS answer 405
ROUTE_METHODS = ["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"
REQUEST_TIMEOUT_MESSAGE = "Request timed out"

StatsFetcher = Callable[[MiddlewareContext], Awaitable[BaseModel]]


def cache_control(max_age: int) -> str:
    return f"public, max-age={max_age}"


async def handle_stats_request(
    request: Request,
    *,
    settings: Settings,
    middlewares: Sequence[Middleware],
    fetch: StatsFetcher,
    cache_max_age: int,
    label: str,
) -> Response:
    """
    Run one stats request through the method checks, middleware and service.

    Args:
        request: The incoming request.
        settings: Application settings (CORS list, timeout, environment).
        middlewares: Ordered pipeline for this route.
        fetch: Coroutine producing the response data from the context.
        cache_max_age: Cache-Control max-age in seconds for successful responses.
        label: Metric family name used in log messages.

    Returns:
        The HTTP response. Never raises.
    """
    ctx = MiddlewareContext(request=request, cors=CorsPolicy.from_settings(settings))

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=ctx.cors_headers())

    if request.method != "GET":
        return ctx.error_response(405, METHOD_NOT_ALLOWED_MESSAGE)

    try:
        result = await run_middleware(ctx, middlewares)
        if isinstance(result, ShortCircuit):
            return result.response

        try:
            data = await asyncio.wait_for(fetch(ctx), timeout=settings.request_timeout_seconds)
        except asyncio.TimeoutError:
            raise ServiceError(REQUEST_TIMEOUT_MESSAGE)

        body = StatsResponse(success=True, data=data, timestamp=utc_timestamp())
        return ctx.json_response(200, body, {"Cache-Control": cache_control(cache_max_age)})

    except Exception as e:
        logger.exception(f"Error fetching {label} stats: {e}")
        return ctx.error_response(status_code_for(e), sanitize_error(e, settings))
