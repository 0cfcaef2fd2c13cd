"""JWT issuing/verification and password hashing."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.core.exceptions import AuthenticationError

ACCESS = "access"
REFRESH = "refresh"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(claims: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    payload = {**claims, "exp": datetime.now(UTC) + lifetime, "type": token_type}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign a short-lived access token carrying ``data`` as claims."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(data, ACCESS, lifetime)


def create_refresh_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign a refresh token; only accepted by the refresh endpoint."""
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _encode(data, REFRESH, lifetime)


def verify_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    """Decode ``token`` and check it is of ``token_type``.

    Raises:
        AuthenticationError: If the signature, expiry or type is wrong
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {e}") from e
    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return payload


def create_tokens(user_id: int, email: str) -> dict[str, str]:
    """Issue an access/refresh pair for a user."""
    claims = {"sub": str(user_id), "email": email}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }
