"""Booking admission against an in-memory store."""

import asyncio
from datetime import date
from itertools import count
from types import SimpleNamespace

import pytest

from app.core.exceptions import (
    BookingConflict,
    SelfBookingForbidden,
    SpotNotFound,
    ValidationError,
)
from app.core.locks import KeyedLock
from app.services.booking_service import BookingService


class InMemoryBookingStore:
    """Yields to the event loop between reads and writes to expose races."""

    def __init__(self):
        self.spots: dict[int, SimpleNamespace] = {}
        self.bookings: list[SimpleNamespace] = []
        self.locked_reads: list[int] = []
        self.commits = 0
        self._ids = count(1)

    def add_spot(self, spot_id: int, owner_id: int) -> SimpleNamespace:
        spot = SimpleNamespace(id=spot_id, owner_id=owner_id)
        self.spots[spot_id] = spot
        return spot

    def add_booking(self, spot_id: int, user_id: int, start: date, end: date) -> SimpleNamespace:
        booking = SimpleNamespace(
            id=next(self._ids), spot_id=spot_id, user_id=user_id, start_date=start, end_date=end
        )
        self.bookings.append(booking)
        return booking

    async def find_spot_by_id(self, spot_id, lock=False):
        if lock:
            self.locked_reads.append(spot_id)
        await asyncio.sleep(0)
        return self.spots.get(spot_id)

    async def find_bookings_by_spot(self, spot_id, with_user=False):
        await asyncio.sleep(0)
        return [b for b in self.bookings if b.spot_id == spot_id]

    async def create_booking(self, spot, user, start_date, end_date):
        await asyncio.sleep(0)
        return self.add_booking(spot.id, user.id, start_date, end_date)

    async def commit(self):
        await asyncio.sleep(0)
        self.commits += 1


@pytest.fixture
def store():
    store = InMemoryBookingStore()
    store.add_spot(spot_id=1, owner_id=1)
    store.add_spot(spot_id=2, owner_id=1)
    return store


@pytest.fixture
def service(store):
    return BookingService(store, locks=KeyedLock())


GUEST = SimpleNamespace(id=2)
OWNER = SimpleNamespace(id=1)


async def test_admits_into_empty_schedule(service, store):
    booking = await service.create_booking(1, GUEST, date(2024, 3, 10), date(2024, 3, 15))

    assert booking.spot_id == 1
    assert booking.user_id == GUEST.id
    assert (booking.start_date, booking.end_date) == (date(2024, 3, 10), date(2024, 3, 15))
    assert store.commits == 1
    assert store.locked_reads == [1]


async def test_missing_spot_is_reported_before_date_validation(service):
    with pytest.raises(SpotNotFound):
        await service.create_booking(99, GUEST, date(2024, 3, 15), date(2024, 3, 10))


@pytest.mark.parametrize("end", [date(2024, 3, 10), date(2024, 3, 9)])
async def test_end_on_or_before_start_fails_even_when_dates_conflict(service, store, end):
    store.add_booking(1, 3, date(2024, 3, 10), date(2024, 3, 15))

    with pytest.raises(ValidationError) as exc_info:
        await service.create_booking(1, GUEST, date(2024, 3, 10), end)

    assert exc_info.value.status_code == 400
    assert exc_info.value.errors == {"endDate": "endDate cannot be on or before startDate"}
    assert len(store.bookings) == 1


async def test_conflict_reports_field_and_writes_nothing(service, store):
    store.add_booking(1, 3, date(2024, 3, 10), date(2024, 3, 15))

    with pytest.raises(BookingConflict) as exc_info:
        await service.create_booking(1, GUEST, date(2024, 3, 12), date(2024, 3, 20))

    assert exc_info.value.status_code == 403
    assert exc_info.value.errors == {"startDate": "Start date conflicts with an existing booking"}
    assert len(store.bookings) == 1
    assert store.commits == 0


async def test_conflict_takes_precedence_over_self_booking(service, store):
    store.add_booking(1, 3, date(2024, 3, 10), date(2024, 3, 15))

    with pytest.raises(BookingConflict):
        await service.create_booking(1, OWNER, date(2024, 3, 10), date(2024, 3, 12))


async def test_user_id_matching_spot_id_cannot_book(service, store):
    with pytest.raises(SelfBookingForbidden) as exc_info:
        await service.create_booking(1, OWNER, date(2024, 3, 10), date(2024, 3, 12))

    assert exc_info.value.message == "Spot cannot belong to the current user"
    assert store.bookings == []


async def test_self_booking_check_compares_user_id_with_spot_id(service):
    # user 1 owns spot 2, but only user 2 is refused on it
    booking = await service.create_booking(2, OWNER, date(2024, 3, 10), date(2024, 3, 12))
    assert booking.user_id == OWNER.id

    with pytest.raises(SelfBookingForbidden):
        await service.create_booking(2, GUEST, date(2024, 4, 10), date(2024, 4, 12))


async def test_concurrent_identical_requests_admit_exactly_one(service, store):
    results = await asyncio.gather(
        *[
            service.create_booking(1, GUEST, date(2024, 5, 1), date(2024, 5, 4))
            for _ in range(5)
        ],
        return_exceptions=True,
    )

    admitted = [r for r in results if not isinstance(r, Exception)]
    refused = [r for r in results if isinstance(r, BookingConflict)]
    assert len(admitted) == 1
    assert len(refused) == 4
    assert len(store.bookings) == 1


async def test_privileged_view_when_spot_id_equals_user_id(service, store):
    store.add_booking(1, 2, date(2024, 3, 10), date(2024, 3, 15))

    privileged, bookings = await service.list_bookings_for_spot(1, OWNER)
    assert privileged is True
    assert len(bookings) == 1

    privileged, _ = await service.list_bookings_for_spot(1, GUEST)
    assert privileged is False

    # owner of spot 2 still gets the public view
    privileged, _ = await service.list_bookings_for_spot(2, OWNER)
    assert privileged is False


async def test_listing_missing_spot_raises(service):
    with pytest.raises(SpotNotFound):
        await service.list_bookings_for_spot(42, GUEST)
