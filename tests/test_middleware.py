from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
import pytest
import redis.asyncio as redis

from app.core.middleware import RateLimitMiddleware


class FakePipeline:
    """Mimics the buffered sliding-window pipeline the limiter issues."""

    def __init__(self, backend: "FakeRedis") -> None:
        self.backend = backend

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc) -> None:
        return None

    async def zremrangebyscore(self, key, low, high):
        return self

    async def zcard(self, key):
        return self

    async def zadd(self, key, mapping):
        return self

    async def expire(self, key, seconds):
        return self

    async def execute(self):
        if self.backend.broken:
            raise redis.ConnectionError("redis down")
        count = self.backend.hits
        self.backend.hits += 1
        return [0, count, 1, True]


class FakeRedis:
    def __init__(self, broken: bool = False) -> None:
        self.hits = 0
        self.broken = broken

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)


@pytest.fixture
def limited_client(monkeypatch):
    def build(fake: FakeRedis, limit: int) -> AsyncClient:
        async def get_fake_redis(self):
            return fake

        monkeypatch.setattr(RateLimitMiddleware, "get_redis", get_fake_redis)

        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, requests_per_minute=limit)

        @app.get("/ping")
        async def ping() -> dict:
            return {"ok": True}

        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return build


async def test_security_and_request_headers(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Response-Time"].endswith("s")


async def test_rate_limit_rejects_over_limit(limited_client):
    async with limited_client(FakeRedis(), limit=2) as ac:
        first = await ac.get("/ping")
        second = await ac.get("/ping")
        third = await ac.get("/ping")

    assert first.status_code == 200
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert second.status_code == 200
    assert third.status_code == 429
    assert third.json() == {
        "message": "Too many requests. Please try again later.",
        "statusCode": 429,
    }
    assert third.headers["Retry-After"] == "60"


async def test_rate_limit_lets_requests_through_when_redis_is_down(limited_client):
    async with limited_client(FakeRedis(broken=True), limit=1) as ac:
        responses = [await ac.get("/ping") for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200, 200]
