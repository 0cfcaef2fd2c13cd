"""Booking admission: who may book a spot, and for which dates."""

import logging
from datetime import date

from app.core.exceptions import (
    BookingConflict,
    SelfBookingForbidden,
    SpotNotFound,
    ValidationError,
)
from app.core.locks import KeyedLock, spot_booking_locks
from app.domain.booking_conflicts import END_DATE, DateRange, find_conflict, to_range
from app.models.booking import Booking
from app.models.user import User
from app.repositories.booking_repository import BookingStore

logger = logging.getLogger(__name__)

END_BEFORE_START_MESSAGE = "endDate cannot be on or before startDate"


def has_privileged_booking_view(spot_id: int, user: User) -> bool:
    """Whether ``user`` sees booker identities on a spot's bookings.

    Compares the spot id with the user id, not the spot's owner id. Kept
    as-is for compatibility with existing clients.
    """
    return spot_id == user.id


def is_self_booking(spot_id: int, user: User) -> bool:
    """Same id comparison as ``has_privileged_booking_view``."""
    return user.id == spot_id


class BookingService:
    """Admission controller for spot bookings.

    Every request for one spot runs its read-check-write under a per-spot
    lock, and the spot row is locked for update, so two identical requests
    cannot both be admitted.
    """

    def __init__(self, store: BookingStore, locks: KeyedLock = spot_booking_locks):
        self.store = store
        self.locks = locks

    async def list_bookings_for_spot(self, spot_id: int, user: User) -> tuple[bool, list[Booking]]:
        """Return ``(privileged, bookings)`` for the spot.

        Raises:
            SpotNotFound: If the spot does not exist
        """
        spot = await self.store.find_spot_by_id(spot_id)
        if spot is None:
            raise SpotNotFound()

        privileged = has_privileged_booking_view(spot.id, user)
        bookings = await self.store.find_bookings_by_spot(spot.id, with_user=privileged)
        return privileged, bookings

    async def create_booking(
        self,
        spot_id: int,
        user: User,
        start_date: date,
        end_date: date,
    ) -> Booking:
        """Admit and persist a booking, or raise the reason it was refused.

        Raises:
            SpotNotFound: If the spot does not exist
            ValidationError: If end_date is on or before start_date
            BookingConflict: If the dates conflict with an existing booking
            SelfBookingForbidden: If the user id matches the spot id
        """
        candidate = to_range(start_date, end_date)

        spot = await self.store.find_spot_by_id(spot_id)
        if spot is None:
            raise SpotNotFound()

        if candidate.end <= candidate.start:
            raise ValidationError({END_DATE: END_BEFORE_START_MESSAGE})

        async with self.locks.hold(spot.id):
            spot = await self.store.find_spot_by_id(spot.id, lock=True)
            if spot is None:
                raise SpotNotFound()

            existing = await self.store.find_bookings_by_spot(spot.id)
            conflict = find_conflict(
                candidate, (DateRange(b.start_date, b.end_date) for b in existing)
            )
            if conflict is not None:
                logger.info(
                    "Booking refused for spot %s (%s..%s): %s overlaps %s..%s",
                    spot.id,
                    candidate.start,
                    candidate.end,
                    conflict.field,
                    conflict.existing.start,
                    conflict.existing.end,
                )
                raise BookingConflict(conflict.field, conflict.message)

            if is_self_booking(spot.id, user):
                logger.info("Booking refused for spot %s: self-booking by user %s", spot.id, user.id)
                raise SelfBookingForbidden()

            booking = await self.store.create_booking(spot, user, candidate.start, candidate.end)
            await self.store.commit()

        logger.info(
            "Booking %s admitted for spot %s by user %s (%s..%s)",
            booking.id,
            spot.id,
            user.id,
            booking.start_date,
            booking.end_date,
        )
        return booking
