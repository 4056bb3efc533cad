"""
Ordered, short-circuiting middleware pipeline shared by the stats endpoints.

A middleware step receives the per-request MiddlewareContext and returns either
Continue() or ShortCircuit(response). run_middleware() runs the steps in order
and stops at the first ShortCircuit; later steps are not invoked and the
short-circuit response becomes the HTTP response.

Steps implement check(ctx) and raise a StatsError subclass to reject the
request; Middleware.process() turns that error into the rejection response.

Standard order per endpoint:
    [RateLimitMiddleware(limiter), AuthMiddleware(settings), ValidationMiddleware()]
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Union

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from dhan_stats.core.errors import RateLimitError, StatsError, status_code_for
from dhan_stats.middleware.cors import CorsPolicy
from dhan_stats.models.schemas import StatsQueryParams, StatsResponse

if TYPE_CHECKING:
    from dhan_stats.middleware.auth import AuthResult


logger = logging.getLogger(__name__)


# =============================================================================
# Context and Results
# =============================================================================

@dataclass
class MiddlewareContext:
    """
    Per-request state passed by reference through the pipeline.

    Attributes:
        request: The incoming request.
        cors: CORS policy used for every response of this request.
        auth_result: Set by AuthMiddleware once the caller is authorized.
        validated_params: Set by ValidationMiddleware.
    """
    request: Request
    cors: CorsPolicy
    auth_result: Optional[AuthResult] = None
    validated_params: Optional[StatsQueryParams] = None

    @property
    def origin(self) -> Optional[str]:
        return self.request.headers.get("origin")

    def cors_headers(self) -> Dict[str, str]:
        return self.cors.headers(self.origin)

    def json_response(
        self,
        status_code: int,
        body: StatsResponse,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        """Envelope response carrying the CORS headers plus any extra headers."""
        response_headers = self.cors_headers()
        if headers:
            response_headers.update(headers)
        return JSONResponse(status_code=status_code, content=body.to_payload(), headers=response_headers)

    def error_response(
        self,
        status_code: int,
        message: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> JSONResponse:
        return self.json_response(status_code, StatsResponse(success=False, error=message), headers)


@dataclass(frozen=True)
class Continue:
    """Proceed to the next middleware."""


@dataclass(frozen=True)
class ShortCircuit:
    """Stop the pipeline and answer with this response."""
    response: Response


MiddlewareResult = Union[Continue, ShortCircuit]


# =============================================================================
# Middleware Base
# =============================================================================

class Middleware(ABC):
    """
    One step of the pipeline.

    Subclasses implement check(); raising a StatsError rejects the request with
    the matching status code.
    """

    # A ConfigurationError raised by this step is reported as 401 instead of 500
    auth_path: bool = False

    async def process(self, ctx: MiddlewareContext) -> MiddlewareResult:
        try:
            await self.check(ctx)
        except StatsError as exc:
            return ShortCircuit(self.reject(ctx, exc))
        return Continue()

    @abstractmethod
    async def check(self, ctx: MiddlewareContext) -> None:
        """Inspect the request; raise a StatsError to reject it."""

    def reject(self, ctx: MiddlewareContext, error: StatsError) -> Response:
        status_code = status_code_for(error, auth_path=self.auth_path)
        headers = None
        if isinstance(error, RateLimitError):
            headers = {
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(int(error.reset_at * 1000)),
            }
        logger.warning(f"{type(self).__name__} rejected {ctx.request.url.path} with {status_code}: {error}")
        return ctx.error_response(status_code, str(error) or "Unauthorized", headers)


async def run_middleware(
    ctx: MiddlewareContext,
    middlewares: Sequence[Middleware],
) -> MiddlewareResult:
    """
    Run middlewares in order, stopping at the first short-circuit.

    Args:
        ctx: Per-request context, mutated by the steps.
        middlewares: Ordered pipeline steps.

    Returns:
        The first ShortCircuit produced, or Continue() if every step passed.
    """
    for middleware in middlewares:
        result = await middleware.process(ctx)
        if isinstance(result, ShortCircuit):
            return result
    return Continue()
