"""Database models."""

from app.models.booking import Booking
from app.models.review import Review
from app.models.spot import Spot, SpotImage
from app.models.user import User

__all__ = [
    # User
    "User",
    # Spot
    "Spot",
    "SpotImage",
    # Booking
    "Booking",
    # Review
    "Review",
]
