# blogapi/core/exceptions.py
"""
Domain errors raised by the service layer.

Handlers never catch these. The responders registered in ``create_app`` turn
them into the failure envelope using ``status_code`` and ``error_code``.
"""
from typing import Any, Dict, Optional


class ApiError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details


class BadRequestError(ApiError, ValueError):
    status_code = 400
    error_code = "BAD_REQUEST"


class UnauthorizedError(ApiError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenError(ApiError, PermissionError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(ApiError, LookupError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ApiError):
    status_code = 409
    error_code = "CONFLICT"


class UpstreamServiceError(ApiError):
    """A third-party provider (payments, storage, AI) failed or is not configured."""
    status_code = 502
    error_code = "UPSTREAM_SERVICE_ERROR"
