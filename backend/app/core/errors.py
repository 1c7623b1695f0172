"""
Typed application errors.

Every expected failure is an AppError value carrying the HTTP status,
a machine-readable code, a human message and optional structured details.
Services return them inside an Err outcome; the API layer serializes them
into the standard error body:

    {"error": {"code": "...", "message": "...", "details": [...]}}
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import status


VALIDATION_ERROR = "VALIDATION_ERROR"
EMAIL_EXISTS = "EMAIL_EXISTS"
INVALID_ROLE = "INVALID_ROLE"
INVALID_STATUS = "INVALID_STATUS"
DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
UNAUTHORIZED = "UNAUTHORIZED"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
FORBIDDEN = "FORBIDDEN"
NOT_FOUND = "NOT_FOUND"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class AppError:
    status_code: int
    code: str
    message: str
    details: list[Any] = field(default_factory=list)

    def to_body(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": list(self.details),
            }
        }


def validation_error(message: str = "Invalid request", details: Optional[list[Any]] = None) -> AppError:
    return AppError(status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR, message, details or [])


def email_exists() -> AppError:
    return AppError(status.HTTP_400_BAD_REQUEST, EMAIL_EXISTS, "Email already registered")


def invalid_role() -> AppError:
    return AppError(status.HTTP_400_BAD_REQUEST, INVALID_ROLE, "Admin role cannot be self-assigned")


def invalid_status(message: str = "Cannot book unpublished experiences") -> AppError:
    return AppError(status.HTTP_400_BAD_REQUEST, INVALID_STATUS, message)


def duplicate_booking() -> AppError:
    return AppError(
        status.HTTP_400_BAD_REQUEST,
        DUPLICATE_BOOKING,
        "You already have a confirmed booking for this experience",
    )


def unauthorized(message: str = "Authentication required") -> AppError:
    return AppError(status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED, message)


def invalid_credentials() -> AppError:
    # Same message for unknown email and wrong password
    return AppError(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS, "Invalid email or password")


def forbidden(message: str = "Insufficient permissions") -> AppError:
    return AppError(status.HTTP_403_FORBIDDEN, FORBIDDEN, message)


def not_found(message: str = "Resource not found") -> AppError:
    return AppError(status.HTTP_404_NOT_FOUND, NOT_FOUND, message)


def internal_error() -> AppError:
    return AppError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR,
        "An unexpected error occurred",
    )
