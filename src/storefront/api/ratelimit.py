"""
storefront.api.ratelimit

Request quotas for the service routers.

Responsibilities:
- Pick the limiter backend from settings: Redis-backed `fastapi-limiter` when
  `redis_url` is configured, an in-process sliding window otherwise.
- Expose the limiter as a FastAPI dependency (429 + Retry-After when exceeded).
- Open/close the Redis connection alongside the app lifespan.
"""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict, deque
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis_async
from fastapi import HTTPException, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from storefront.observability.logging import get_logger
from storefront.settings import Settings

log = get_logger(__name__)

RateLimitDependency = Callable[[Request, Response], Awaitable[Any]]

TOO_MANY_REQUESTS = "Too many requests, please try again later."


class LocalRateLimiter:
    """
    Sliding-window limiter held in process memory, keyed by client address.

    Each worker keeps its own windows; configure `redis_url` for a quota shared
    across workers.
    """

    def __init__(
        self,
        *,
        times: int,
        seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._times = times
        self._seconds = seconds
        self._clock = clock
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    async def __call__(self, request: Request, response: Response) -> None:
        key = request.client.host if request.client else "anonymous"
        now = self._clock()
        window_start = now - self._seconds

        async with self._lock:
            self._sweep(now, window_start)
            hits = self._hits[key]
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self._times:
                retry_after = max(1, int(self._seconds - (now - hits[0])))
                log.info("rate_limited", client=key, retry_after=retry_after)
                raise HTTPException(
                    status_code=HTTP_429_TOO_MANY_REQUESTS,
                    detail=TOO_MANY_REQUESTS,
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)
            remaining = self._times - len(hits)

        response.headers["RateLimit-Limit"] = str(self._times)
        response.headers["RateLimit-Remaining"] = str(remaining)

    def _sweep(self, now: float, window_start: float) -> None:
        # Drop idle clients at most once per window.
        if now - self._last_sweep < self._seconds:
            return
        self._last_sweep = now
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]


def build_rate_limiter(settings: Settings) -> RateLimitDependency | None:
    if not settings.rate_limit_enabled:
        return None
    if settings.redis_url:
        return RateLimiter(
            times=settings.rate_limit_requests, seconds=settings.rate_limit_window_seconds
        )
    return LocalRateLimiter(
        times=settings.rate_limit_requests, seconds=settings.rate_limit_window_seconds
    )


async def open_rate_limit_backend(settings: Settings) -> redis_async.Redis | None:
    # Only the Redis backend needs process-wide initialisation.
    if not (settings.rate_limit_enabled and settings.redis_url):
        return None
    client = redis_async.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    await FastAPILimiter.init(client)
    log.info("rate_limiter_initialized", backend="redis")
    return client


async def close_rate_limit_backend(client: redis_async.Redis | None) -> None:
    if client is None:
        return
    await FastAPILimiter.close()
    log.info("rate_limiter_closed", backend="redis")


# --- Module Notes -----------------------------------------------------------
# `api.app` attaches the limiter to service routers only, so liveness and
# readiness checks never consume client quota.
