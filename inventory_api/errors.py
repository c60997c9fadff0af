"""
Error taxonomy shared by the store layer and the HTTP layer.

Every error carries the HTTP status it maps to; a single exception handler in
`inventory_api.main` renders them as `{"error": ..., "details": ...}`.
"""
from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid input"


class DuplicateKey(ApiError):
    status_code = 400
    default_message = "Duplicate key"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "No token provided"


class InvalidCredential(ApiError):
    status_code = 401
    default_message = "Invalid token"


class InvalidCredentials(ApiError):
    status_code = 401
    default_message = "Invalid username or password"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Insufficient permissions"


class ServerError(ApiError):
    status_code = 500
    default_message = "Server error"
