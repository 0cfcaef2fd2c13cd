"""Spot-related Pydantic schemas."""

import math
from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.schemas.common import CamelModel

SPOT_FIELD_MESSAGES = {
    "address": "address should not be empty",
    "city": "City is required",
    "state": "State is required",
    "country": "Country is required",
    "lat": "Latitude is not valid",
    "lng": "Longitude is not valid",
    "name": "Name must be less than 50 characters",
    "description": "Description is required",
    "price": "Price per day is required",
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_numeric(value: Any) -> bool:
    """Finite int, float or numeric string; NaN and infinities are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return False
    try:
        return math.isfinite(float(value))
    except (ValueError, OverflowError):
        return False


class SpotCreate(CamelModel):
    """Schema for creating or replacing a spot.

    Every field is checked even when absent, so a missing field reports the
    same message as an empty one.
    """

    model_config = ConfigDict(validate_default=True, allow_inf_nan=False)

    max_name_length: ClassVar[int] = 50

    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None
    name: str | None = None
    description: str | None = None
    price: float | None = None

    @field_validator("address", "city", "state", "country", "description", "price", mode="before")
    @classmethod
    def require_value(cls, v: Any, info: ValidationInfo) -> Any:
        if _is_blank(v):
            raise ValueError(SPOT_FIELD_MESSAGES[info.field_name])
        return v

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def require_number(cls, v: Any, info: ValidationInfo) -> Any:
        if _is_blank(v) or not _is_numeric(v):
            raise ValueError(SPOT_FIELD_MESSAGES[info.field_name])
        return v

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        if _is_blank(v) or (isinstance(v, str) and len(v) > cls.max_name_length):
            raise ValueError(SPOT_FIELD_MESSAGES["name"])
        return v


class SpotResponse(CamelModel):
    """Schema for a spot record."""

    id: int
    owner_id: int
    address: str
    city: str
    state: str
    country: str
    lat: float
    lng: float
    name: str
    description: str
    price: float
    created_at: datetime
    updated_at: datetime


class SpotSummaryResponse(SpotResponse):
    """Spot in a listing, with rating and preview image."""

    avg_rating: float | None = None
    preview_image: str | None = None


class SpotListResponse(BaseModel):
    """``{"Spots": [...]}`` wrapper."""

    Spots: list[SpotSummaryResponse]


class SpotImageCreate(CamelModel):
    """Schema for adding an image to a spot."""

    url: str = Field(..., min_length=1)
    preview: bool = False


class SpotImageResponse(CamelModel):
    id: int
    url: str
    preview: bool


class SpotOwner(CamelModel):
    id: int
    first_name: str
    last_name: str


class SpotDetailResponse(SpotResponse):
    """Spot details with images, owner and review statistics."""

    num_reviews: int
    avg_rating: float | None = None
    spot_images: list[SpotImageResponse] = Field(
        validation_alias="spot_images", serialization_alias="SpotImages"
    )
    owner: SpotOwner = Field(validation_alias="owner", serialization_alias="Owner")
