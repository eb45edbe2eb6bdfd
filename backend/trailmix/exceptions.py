"""
TrailMix Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error scenario.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services and the auth dependency; caught by global handlers.

Exception Hierarchy:
    TrailMixError (base)
    ├── UnauthenticatedError     → 401 Unauthorized
    ├── ValidationError          → 400 Bad Request
    ├── ConflictError            → 400 Bad Request (duplicate unique key)
    ├── InvalidCredentialsError  → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class TrailMixError(Exception):
    """
    Base exception for all TrailMix application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 400s)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthenticatedError(TrailMixError):
    """
    Raised when a protected route is called without a usable bearer token.

    When:    Authorization header missing, malformed, badly signed, or expired.
    HTTP:    401 Unauthorized
    """

    status_code = 401
    error_code = "unauthenticated"

    def __init__(
        self,
        message: str = "No token provided",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(TrailMixError):
    """
    Raised when client input fails validation.

    When:    File type mismatch, size exceeded, missing required fields,
             malformed special points, empty profile update.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(TrailMixError):
    """Raised when an insert or update collides with a unique username/email."""

    status_code = 400
    error_code = "conflict"

    def __init__(
        self,
        message: str = "Username or email already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(TrailMixError):
    """
    Raised on login with an unknown email or a wrong password.

    The message is identical in both cases so callers cannot probe which
    emails are registered.
    """

    status_code = 400
    error_code = "invalid_credentials"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class NotFoundError(TrailMixError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE by an id with no matching row.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class FileStorageError(TrailMixError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TrailMixError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, or update failed.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. Driver
        details (SQL text, constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
