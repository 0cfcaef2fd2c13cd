"""HTTP middleware: rate limiting, request logging and security headers."""

import logging
import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import redis.asyncio as redis

from app.config import settings
from app.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60

# Paths never rate limited
EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


def client_ip(request: Request) -> str:
    """Best guess at the caller's address, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding window limit kept in a Redis sorted set.

    When Redis cannot be reached the request is let through.
    """

    def __init__(self, app, requests_per_minute: int = 100, redis_url: str | None = None):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.redis_url = redis_url or settings.redis_url
        self._redis: redis.Redis | None = None

    async def get_redis(self) -> redis.Redis:
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)
        return self._redis

    async def _count_hit(self, key: str, now: int) -> int:
        """Record a hit and return how many hits preceded it in the window."""
        redis_client = await self.get_redis()
        async with redis_client.pipeline(transaction=True) as pipe:
            await pipe.zremrangebyscore(key, 0, now - WINDOW_SECONDS)
            await pipe.zcard(key)
            await pipe.zadd(key, {str(time.time_ns()): now})
            await pipe.expire(key, WINDOW_SECONDS)
            results = await pipe.execute()
        return results[1]

    def _limit_headers(self, remaining: int, now: int) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.requests_per_minute),
            "X-RateLimit-Remaining": str(max(0, remaining)),
            "X-RateLimit-Reset": str(now + WINDOW_SECONDS),
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        now = int(time.time())
        try:
            seen = await self._count_hit(f"rate_limit:{client_ip(request)}", now)
        except redis.RedisError:
            logger.warning("Rate limiter unavailable, allowing request through")
            return await call_next(request)

        if seen >= self.requests_per_minute:
            error = RateLimitExceeded()
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers={"Retry-After": str(WINDOW_SECONDS), **self._limit_headers(0, now)},
            )

        response = await call_next(request)
        response.headers.update(self._limit_headers(self.requests_per_minute - seen - 1, now))
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each response with a request id and its handling time."""

    slow_request_seconds = 1.0

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        request.state.request_id = request_id

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.3f}s"

        logger.debug(
            "%s %s -> %s (%.3fs) [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            request_id,
        )
        if elapsed > self.slow_request_seconds:
            logger.warning("Slow request: %s %s took %.3fs", request.method, request.url.path, elapsed)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add standard hardening headers to every response."""

    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        if not settings.debug:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
