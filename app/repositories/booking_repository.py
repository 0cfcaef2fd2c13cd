"""Booking store: persistence of spots and bookings for booking admission."""

import logging
from datetime import date
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.booking import Booking
from app.models.spot import Spot
from app.models.user import User

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    """Operations the booking service needs from storage."""

    async def find_spot_by_id(self, spot_id: int, lock: bool = False) -> Spot | None: ...

    async def find_bookings_by_spot(self, spot_id: int, with_user: bool = False) -> list[Booking]: ...

    async def create_booking(self, spot: Spot, user: User, start_date: date, end_date: date) -> Booking: ...

    async def commit(self) -> None: ...


class BookingRepository:
    """SQLAlchemy implementation of ``BookingStore``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_spot_by_id(self, spot_id: int, lock: bool = False) -> Spot | None:
        """Fetch a spot; with ``lock`` the row is held FOR UPDATE until commit.

        SQLite ignores the row lock, PostgreSQL honours it.
        """
        query = select(Spot).where(Spot.id == spot_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_bookings_by_spot(self, spot_id: int, with_user: bool = False) -> list[Booking]:
        """Bookings for a spot in insertion order."""
        query = select(Booking).where(Booking.spot_id == spot_id).order_by(Booking.id)
        if with_user:
            query = query.options(selectinload(Booking.user))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_booking(self, spot: Spot, user: User, start_date: date, end_date: date) -> Booking:
        booking = Booking(
            spot_id=spot.id,
            user_id=user.id,
            start_date=start_date,
            end_date=end_date,
        )
        self.db.add(booking)
        await self.db.flush()
        await self.db.refresh(booking)
        return booking

    async def commit(self) -> None:
        await self.db.commit()
