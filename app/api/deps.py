"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError
from app.core.security import ACCESS, verify_token
from app.database import get_db
from app.models.user import User
from app.repositories.booking_repository import BookingRepository
from app.services.booking_service import BookingService
from app.services.spot_service import SpotService

# Missing credentials are reported by get_current_user, not by the scheme
security = HTTPBearer(auto_error=False)


async def user_from_token(db: AsyncSession, token: str, token_type: str = ACCESS) -> User:
    """Resolve the user a token was issued to.

    Raises:
        AuthenticationError: If the token is invalid or its user is gone
    """
    payload = verify_token(token, token_type=token_type)
    subject = str(payload.get("sub") or "")
    if not subject.isdigit():
        raise AuthenticationError("Invalid token payload")

    user = await db.scalar(select(User).where(User.id == int(subject)))
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None:
        raise AuthenticationError()
    return await user_from_token(db, credentials.credentials)


def get_spot_service(db: Annotated[AsyncSession, Depends(get_db)]) -> SpotService:
    return SpotService(db)


def get_booking_service(db: Annotated[AsyncSession, Depends(get_db)]) -> BookingService:
    return BookingService(BookingRepository(db))


CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
