"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCreate,
    BookingPublicResponse,
    BookingResponse,
    BookingWithUserResponse,
)
from app.schemas.spot import (
    SpotCreate,
    SpotDetailResponse,
    SpotImageCreate,
    SpotImageResponse,
    SpotListResponse,
    SpotResponse,
    SpotSummaryResponse,
)
from app.schemas.user import (
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "RefreshTokenRequest",
    # Spot
    "SpotCreate",
    "SpotResponse",
    "SpotSummaryResponse",
    "SpotListResponse",
    "SpotDetailResponse",
    "SpotImageCreate",
    "SpotImageResponse",
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingPublicResponse",
    "BookingWithUserResponse",
]
