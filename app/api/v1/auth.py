"""Registration, login and token refresh."""

from fastapi import APIRouter, status
from sqlalchemy import or_, select

from app.api.deps import CurrentUser, DbSession, user_from_token
from app.core.exceptions import AuthenticationError, ValidationError
from app.core.security import REFRESH, create_tokens, get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import (
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: DbSession) -> TokenResponse:
    """Create an account and sign the new user in."""
    taken = {
        "email": User.email == user_data.email,
        "username": User.username == user_data.username,
    }
    for field, condition in taken.items():
        if await db.scalar(select(User.id).where(condition)) is not None:
            raise ValidationError({field: f"User with that {field} already exists"})

    user = User(
        email=user_data.email,
        username=user_data.username,
        password_hash=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
    )
    db.add(user)
    await db.flush()

    return TokenResponse(**create_tokens(user.id, user.email))


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin, db: DbSession) -> TokenResponse:
    """Sign in with an email or a username."""
    user = await db.scalar(
        select(User).where(
            or_(User.email == credentials.credential, User.username == credentials.credential)
        )
    )
    if user is None or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    return TokenResponse(**create_tokens(user.id, user.email))


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(request: RefreshTokenRequest, db: DbSession) -> TokenResponse:
    """Trade a refresh token for a new token pair."""
    user = await user_from_token(db, request.refresh_token, token_type=REFRESH)
    return TokenResponse(**create_tokens(user.id, user.email))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> User:
    return current_user
