"""Custom application exceptions."""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    Rendered as ``{"message", "statusCode"[, "errors"]}`` by the handler
    registered in ``app.main``.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        message: str = "An unexpected error occurred",
        errors: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.errors = errors
        super().__init__(status_code=status_code, detail=message, headers=headers)

    def to_dict(self) -> dict:
        body: dict = {"message": self.message, "statusCode": self.status_code}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, errors: dict[str, str] | None = None, message: str = "Validation error") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message=message, errors=errors)


class SpotNotFound(AppException):
    """Spot not found exception."""

    def __init__(self, message: str = "Spot couldn't be found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, message=message)


class BookingConflict(AppException):
    """Requested dates conflict with an existing booking."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message="Sorry, this spot is already booked for the specified dates",
            errors={field: detail},
        )


class SelfBookingForbidden(AppException):
    """Principal attempted to book a spot it is matched against."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message="Spot cannot belong to the current user",
        )


class Forbidden(AppException):
    """Ownership mismatch on a spot mutation."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, message=message)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, message: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, message=message)
