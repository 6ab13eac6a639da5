"""
Service-level errors.

Services raise these instead of HTTPException so they stay usable outside a
request. The app registers a handler that renders them as {"detail": ...}.
"""

from typing import Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class ConflictError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "User already exists"


class InvalidCredentialsError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid credentials"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Could not validate credentials"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Access denied"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "User not found"


class InvalidCodeError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid code"


class ExpiredCodeError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Code expired"


class ExtractionError(ServiceError):
    detail = "Could not extract resume text"
