"""
Domain errors.

Services raise these; the exception handlers in main.py turn them into
JSON responses with a stable ``code`` the client can switch on.
"""

from fastapi import status


class CommissionServiceError(Exception):
    """Base class for client-facing business errors."""

    code = "ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CommissionServiceError):
    """Booking, hotel, agreement or record does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(CommissionServiceError):
    """Entity is not in a state that allows the operation."""

    code = "INVALID_STATE"
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailedError(CommissionServiceError):
    """Input passed schema validation but breaks a business rule."""

    code = "VALIDATION_FAILED"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(CommissionServiceError):
    """A unique constraint was violated."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
