# app/core/exceptions.py
"""
Application error hierarchy.

Services raise these; the handlers registered in ``app.main`` turn them into
``{"success": false, "error": <code>, "message": ..., "details": ...}``
responses with the class's HTTP status.

    AppError
    ├── InvalidError    → 400
    ├── UnauthorizedError → 401
    ├── ForbiddenError  → 403
    ├── NotFoundError   → 404
    ├── ConflictError   → 409
    └── InternalError   → 500
"""

from typing import Any, Optional


class AppError(Exception):
    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidError(AppError):
    """A business rule rejected an otherwise well-formed request."""

    status_code = 400
    default_code = "INVALID_REQUEST"


class UnauthorizedError(AppError):
    status_code = 401
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    status_code = 403
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    default_code = "CONFLICT"


class InternalError(AppError):
    status_code = 500
    default_code = "INTERNAL_ERROR"
