"""
Shared error handling for the Field Management service.
"""

from typing import Dict, Any, Optional, Tuple
from pydantic import BaseModel

from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError


INTERNAL_ERROR_MESSAGE = "An unexpected error occurred."
DATABASE_CONFLICT_MESSAGE = "Database conflict occurred."


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str


class FieldManagementException(Exception):
    """Base exception for Field Management services."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(error=self.message)


class ValidationError(FieldManagementException):
    """Malformed input (bad name, bad body)."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_ARGUMENT", message, details)


class InvalidEmailError(ValidationError):
    """Email claim is empty or not a mailbox address."""

    def __init__(self, message: str = "Invalid email format.", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "INVALID_EMAIL"


class AuthenticationError(FieldManagementException):
    """Identity header missing."""

    status_code = 401

    def __init__(self, message: str = "Missing X-User-Email header. Access denied.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__("UNAUTHENTICATED", message, details)


class NotFoundError(FieldManagementException):
    """Resource absent, or owned by a different identity."""

    status_code = 404

    def __init__(self, message: str = "Not found.", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class ConflictError(FieldManagementException):
    """Uniqueness violation."""

    status_code = 409

    def __init__(self, message: str = "Conflict.", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFLICT", message, details)


class ServiceError(FieldManagementException):
    """Service-related errors. Message is never shown to the caller."""

    status_code = 500

    def __init__(self, message: str = "Service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("INTERNAL_ERROR", message, details)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request.")
    return f"{location}: {message}" if location else message


def translate_exception(exc: Exception) -> Tuple[int, ErrorResponse]:
    """Map any exception to an HTTP status and the public error body.

    Only classified errors carry their own message out; everything else
    collapses to a generic message.
    """
    if isinstance(exc, ServiceError):
        return exc.status_code, ErrorResponse(error=INTERNAL_ERROR_MESSAGE)
    if isinstance(exc, FieldManagementException):
        return exc.status_code, exc.to_response()
    if isinstance(exc, IntegrityError):
        return 409, ErrorResponse(error=DATABASE_CONFLICT_MESSAGE)
    if isinstance(exc, RequestValidationError):
        return 400, ErrorResponse(error=_first_validation_message(exc))
    if isinstance(exc, HTTPException):
        return exc.status_code, ErrorResponse(error=str(exc.detail))
    return 500, ErrorResponse(error=INTERNAL_ERROR_MESSAGE)
