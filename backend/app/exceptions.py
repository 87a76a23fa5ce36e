"""
Samanvi Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions let services and repositories signal *what* went wrong
       while a single set of global handlers decides *how* it is reported.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by schemas, services, repositories, gates and middleware.
When:  During request processing when an expected failure occurs.

Exception Hierarchy:
    SamanviError (base)
    ├── ValidationFailedError     → 400 Bad Request (every offending field listed)
    ├── NotFoundError             → 404 Not Found (domain lookup failed)
    ├── ConflictError             → 409 Conflict (uniqueness or dependants)
    ├── UnauthorizedError         → 401 Unauthorized
    ├── ForbiddenError            → 403 Forbidden
    ├── RateLimitExceededError    → 429 Too Many Requests
    └── StoreError                (raised by repositories only)
        ├── DuplicateRecordError      → 409 "Resource already exists"
        ├── RecordNotFoundError       → 404 "Resource not found"
        └── ConstraintViolationError  → 400 "Database operation failed"

Why store errors are separate from domain errors:
    A domain NotFoundError carries a specific message ("Bus not found") chosen
    by the service. A RecordNotFoundError means the row vanished between the
    service's lookup and the write, so only a generic message is safe.
"""

from typing import Any, Dict, List, Optional


class SamanviError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    code: str = "internal_server_error"

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationFailedError(SamanviError):
    """
    Raised when client input fails validation.

    Carries every violation at once, never only the first one.

    Example response:
        {
            "message": "Validation error",
            "details": [
                {"field": "username", "location": "body", "message": "String should have at least 3 characters"},
                {"field": "password", "location": "body", "message": "Field required"}
            ]
        }
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        message: str = "Validation error",
    ):
        super().__init__(message=message, context={"errors": errors})
        self.errors = errors


class NotFoundError(SamanviError):
    """Raised when a looked-up entity does not exist (or is soft-deleted)."""

    status_code = 404
    code = "not_found"

    def __init__(self, message: str = "Resource not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ConflictError(SamanviError):
    """
    Raised when a write would break a uniqueness or referential invariant.

    When:  Duplicate username/email/registration number/type name, or
           deleting a bus or document type that still has documents.
    """

    status_code = 409
    code = "conflict"

    def __init__(self, message: str = "Resource already exists", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class UnauthorizedError(SamanviError):
    """
    Raised when credentials are missing or wrong.

    Login failures always use the same message so a caller cannot learn
    whether the username exists.
    """

    status_code = 401
    code = "unauthorized"

    def __init__(self, message: str = "Invalid credentials", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ForbiddenError(SamanviError):
    """Raised when a credential was supplied but is not accepted."""

    status_code = 403
    code = "forbidden"

    def __init__(self, message: str = "Forbidden", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SamanviError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes the Retry-After header for HTTP-compliant clients.
    """

    status_code = 429
    code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests from this IP. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


# ══════════════════════════════════════════════════════════════════════════
# Store-level errors (raised by repositories)
# ══════════════════════════════════════════════════════════════════════════


class StoreError(SamanviError):
    """
    Base for failures reported by the database itself.

    Security Note:
        The original driver error is kept in `context` for the server log only.
        Constraint names and SQL text never reach the API consumer.
    """


class DuplicateRecordError(StoreError):
    """A unique constraint rejected the write (e.g. a concurrent duplicate insert)."""

    status_code = 409
    code = "conflict"

    def __init__(self, message: str = "Resource already exists", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class RecordNotFoundError(StoreError):
    """An update or delete targeted a row that does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, message: str = "Resource not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ConstraintViolationError(StoreError):
    """Any other integrity violation (foreign key, not-null, check)."""

    status_code = 400
    code = "database_error"

    def __init__(self, message: str = "Database operation failed", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)
