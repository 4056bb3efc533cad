"""
Request Middleware Module

Ordered checks run before any stats service is invoked:
- rate_limit: fixed-window limiter (in-memory or Redis) -> 429
- auth: shared admin secret -> 401
- validation: range/from/to filters -> 400
- cors: CORS headers attached to every response
"""

from dhan_stats.middleware.cors import CorsPolicy
from dhan_stats.middleware.pipeline import (
    Continue,
    Middleware,
    MiddlewareContext,
    MiddlewareResult,
    ShortCircuit,
    run_middleware,
)
from dhan_stats.middleware.rate_limit import (
    InMemoryRateLimiter,
    RateLimitDecision,
    RateLimitMiddleware,
    RateLimiter,
    RedisRateLimiter,
    build_rate_limiter,
    get_client_identifier,
)
from dhan_stats.middleware.auth import AuthMiddleware, AuthResult, validate_admin_auth
from dhan_stats.middleware.validation import ValidationMiddleware, validate_query_params


__all__ = [
    'CorsPolicy',
    # Pipeline
    'Continue',
    'Middleware',
    'MiddlewareContext',
    'MiddlewareResult',
    'ShortCircuit',
    'run_middleware',
    # Rate limiting
    'InMemoryRateLimiter',
    'RateLimitDecision',
    'RateLimitMiddleware',
    'RateLimiter',
    'RedisRateLimiter',
    'build_rate_limiter',
    'get_client_identifier',
    # Auth
    'AuthMiddleware',
    'AuthResult',
    'validate_admin_auth',
    # Validation
    'ValidationMiddleware',
    'validate_query_params',
]
