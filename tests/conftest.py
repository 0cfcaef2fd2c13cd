"""Shared fixtures: in-memory database, ASGI client and seed helpers."""

import os

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import date
from functools import lru_cache

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.core.security import create_access_token, get_password_hash
from app.database import Base, get_db
from app.main import app
from app.models.booking import Booking
from app.models.review import Review
from app.models.spot import Spot, SpotImage
from app.models.user import User

TEST_PASSWORD = "secret-password"


@lru_cache
def _password_hash() -> str:
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


class Seeder:
    """Insert rows through short-lived committed sessions."""

    def __init__(self, session_maker):
        self.session_maker = session_maker
        self._users = 0

    async def _save(self, obj):
        async with self.session_maker() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return obj

    async def user(self, first_name: str = "Demo", last_name: str = "User") -> User:
        self._users += 1
        n = self._users
        return await self._save(
            User(
                email=f"user{n}@example.com",
                username=f"user{n}",
                password_hash=_password_hash(),
                first_name=first_name,
                last_name=last_name,
            )
        )

    async def spot(self, owner: User, name: str = "Cozy Cabin", **overrides) -> Spot:
        attributes = {
            "address": "123 Disney Lane",
            "city": "San Francisco",
            "state": "California",
            "country": "United States of America",
            "lat": 37.7645358,
            "lng": -122.4730327,
            "name": name,
            "description": "Place where web developers are created",
            "price": 123,
        }
        attributes.update(overrides)
        return await self._save(Spot(owner_id=owner.id, **attributes))

    async def booking(self, spot: Spot, user: User, start: date, end: date) -> Booking:
        return await self._save(
            Booking(spot_id=spot.id, user_id=user.id, start_date=start, end_date=end)
        )

    async def image(self, spot: Spot, url: str, preview: bool = False) -> SpotImage:
        return await self._save(SpotImage(spot_id=spot.id, url=url, preview=preview))

    async def review(self, spot: Spot, user: User, stars: int) -> Review:
        return await self._save(
            Review(spot_id=spot.id, user_id=user.id, review="Great stay", stars=stars)
        )


@pytest.fixture
def seed(session_maker) -> Seeder:
    return Seeder(session_maker)
