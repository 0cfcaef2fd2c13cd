"""Booking-related Pydantic schemas."""

from datetime import date, datetime

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, parse_calendar_date


class BookingCreate(CamelModel):
    """Schema for creating a booking.

    Ordering of the two dates is checked by the booking service, after the
    spot lookup, so a missing spot still answers 404.
    """

    start_date: date
    end_date: date

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def truncate_to_date(cls, v: object) -> object:
        return parse_calendar_date(v)


class BookingResponse(CamelModel):
    """Schema for a booking record."""

    id: int
    spot_id: int
    user_id: int
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime


class BookingPublicResponse(CamelModel):
    """Booking as shown to anyone without the privileged view."""

    spot_id: int
    start_date: date
    end_date: date


class BookingUser(CamelModel):
    id: int
    first_name: str
    last_name: str


class BookingWithUserResponse(BookingResponse):
    """Booking with the booker's identity attached."""

    user: BookingUser = Field(validation_alias="user", serialization_alias="User")
