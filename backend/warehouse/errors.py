"""Errors raised by services and request dependencies.

Every error reaches the client as ``{"error": {"code", "message", "details"}}``.
``code`` and the HTTP status are fixed per class; ``message`` and ``details``
vary per raise site.
"""
from typing import Any

from fastapi import status


class AppError(Exception):
    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str | None = None, *, details: Any | None = None):
        self.message = message or type(self).message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    message = "Validation error"


class AuthError(AppError):
    code = "AUTH_ERROR"
    message = "Authentication failed"
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionError(AppError):  # type: ignore[override]
    code = "PERMISSION_DENIED"
    message = "Insufficient permissions"
    status_code = status.HTTP_403_FORBIDDEN


class PermissionNotConfiguredError(PermissionError):
    message = "Access to this endpoint is not configured"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    code = "CONFLICT_ERROR"
    message = "Resource conflict"
    status_code = status.HTTP_409_CONFLICT


class InsufficientStockError(ConflictError):
    code = "INSUFFICIENT_STOCK"
    message = "Insufficient stock"


class InternalError(AppError):
    code = "INTERNAL_ERROR"
    message = "Internal server error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Framework-raised HTTP errors (401 from authentication, 404/405 from
# routing) borrow the code and message of the matching AppError
_ERRORS_BY_STATUS: dict[int, type[AppError]] = {
    error.status_code: error
    for error in (ValidationError, AuthError, PermissionError, NotFoundError, ConflictError)
}


def error_payload(code: str, message: str, details: Any | None = None) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


def error_for_status(status_code: int) -> tuple[str, str]:
    """Return ``(code, message)`` for an HTTP status raised outside the services."""
    error = _ERRORS_BY_STATUS.get(status_code)
    if error is not None:
        return error.code, error.message
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return InternalError.code, InternalError.message
    return "HTTP_ERROR", "Request failed"
