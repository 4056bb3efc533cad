"""
Fixed-window rate limiting for the stats endpoints.

Each client identifier gets max_requests requests per window. The first request
of a window fixes reset_at; once now >= reset_at the next request opens a fresh
window. Two stores share the RateLimiter contract:

- InMemoryRateLimiter: per-process dict guarded by an asyncio.Lock
- RedisRateLimiter: INCR/PEXPIRE/PTTL counters shared by every worker
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import redis.asyncio as aioredis
from fastapi import Request

from dhan_stats.core.config import Settings
from dhan_stats.core.errors import RateLimitError
from dhan_stats.middleware.pipeline import Middleware, MiddlewareContext


logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded"
UNKNOWN_CLIENT = "unknown"
REDIS_KEY_PREFIX = "dhan_stats:ratelimit:"

# Expired entries are pruned once the table grows past this many keys
PRUNE_THRESHOLD = 1024


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one rate limit check. reset_at is epoch seconds."""
    allowed: bool
    remaining: int
    reset_at: float

    @property
    def reset_at_ms(self) -> int:
        return int(self.reset_at * 1000)


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class RateLimiter(ABC):
    """Per-key fixed window counter."""

    @abstractmethod
    async def check(self, key: str) -> RateLimitDecision:
        """Count one request for key and decide whether it is allowed."""

    async def close(self) -> None:
        """Release any external resources held by the store."""


class InMemoryRateLimiter(RateLimiter):
    """
    Process-local limiter.

    State lives only as long as the process; separate workers count
    independently. The lock makes check() atomic per call so concurrent
    requests for the same key never lose an increment.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = asyncio.Lock()

    async def check(self, key: str) -> RateLimitDecision:
        async with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is None or now >= entry.reset_at:
                if len(self._entries) >= PRUNE_THRESHOLD:
                    self._prune(now)
                entry = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
                self._entries[key] = entry
                return RateLimitDecision(True, self.max_requests - 1, entry.reset_at)

            if entry.count >= self.max_requests:
                return RateLimitDecision(False, 0, entry.reset_at)

            entry.count += 1
            return RateLimitDecision(True, self.max_requests - entry.count, entry.reset_at)

    def _prune(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired rate limit entries")


class RedisRateLimiter(RateLimiter):
    """
    Limiter backed by Redis so every worker shares one count per client.

    The window starts with the first INCR of a key; PEXPIRE is set only when the
    key has no TTL yet, so later requests never extend the window.
    """

    def __init__(
        self,
        client: aioredis.Redis,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    @classmethod
    def from_url(
        cls,
        url: str,
        max_requests: int = 100,
        window_seconds: float = 60.0,
    ) -> "RedisRateLimiter":
        client = aioredis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
            health_check_interval=30,
        )
        return cls(client, max_requests=max_requests, window_seconds=window_seconds)

    async def check(self, key: str) -> RateLimitDecision:
        redis_key = f"{REDIS_KEY_PREFIX}{key}"
        window_ms = int(self.window_seconds * 1000)

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.incr(redis_key)
            pipe.pttl(redis_key)
            count, ttl_ms = await pipe.execute()

        if ttl_ms < 0:
            await self._client.pexpire(redis_key, window_ms)
            ttl_ms = window_ms

        reset_at = self._clock() + ttl_ms / 1000
        count = int(count)
        if count > self.max_requests:
            return RateLimitDecision(False, 0, reset_at)
        return RateLimitDecision(True, self.max_requests - count, reset_at)

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Redis rate limiter connection closed")


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """Redis-backed limiter when RATE_LIMIT_REDIS_URL is set, in-memory otherwise."""
    if settings.rate_limit_redis_url:
        logger.info("Using Redis rate limiter")
        return RedisRateLimiter.from_url(
            settings.rate_limit_redis_url,
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    logger.info("Using in-memory rate limiter")
    return InMemoryRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )


def get_client_identifier(request: Request) -> str:
    """
    Key used to count a caller's requests.

    First entry of X-Forwarded-For, else X-Real-IP. Requests carrying neither
    share the "unknown" bucket.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return UNKNOWN_CLIENT


class RateLimitMiddleware(Middleware):
    """Rejects with 429 once the caller exhausts the current window."""

    def __init__(self, limiter: RateLimiter) -> None:
        self.limiter = limiter

    async def check(self, ctx: MiddlewareContext) -> None:
        identifier = get_client_identifier(ctx.request)
        decision = await self.limiter.check(identifier)
        if not decision.allowed:
            raise RateLimitError(RATE_LIMIT_MESSAGE, decision.reset_at)
