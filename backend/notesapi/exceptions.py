"""
Notes API Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a client-safe `message` and a `context` dict for
       server-side logging. Global handlers registered in main.py turn them
       into JSON error responses with the matching HTTP status.
Who:   Persistence errors are raised by the repository; domain errors are
       raised by the service and caught by the handlers.

Exception Hierarchy:
    Persistence level (never reach the HTTP layer directly)
    RepositoryError
    ├── RecordNotFoundError      no row for the identifier
    └── StorageError             connectivity / constraint / driver failure

    Domain level (mapped to HTTP by main.register_exception_handlers)
    NotesAPIError
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    │   └── NoteNotFoundError
    └── DatabaseError            → 500 Internal Server Error (generic message)
"""

from typing import Any, Dict, Optional


# ══════════════════════════════════════════════════════════════════════════
# Persistence-level errors
# ══════════════════════════════════════════════════════════════════════════


class RepositoryError(Exception):
    """Base class for errors raised by the persistence adapter."""

    def __init__(
        self,
        message: str = "Repository operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class RecordNotFoundError(RepositoryError):
    """No stored row matches the requested identifier."""

    def __init__(self, record_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["record_id"] = record_id
        super().__init__(message=f"No record with id '{record_id}'", context=ctx)
        self.record_id = record_id


class StorageError(RepositoryError):
    """
    The store rejected or failed an operation.

    `context` may hold raw driver text; it is for logs only.
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Domain-level errors
# ══════════════════════════════════════════════════════════════════════════


class NotesAPIError(Exception):
    """
    Base exception for all Notes API application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client,
                  except for ValidationError where it names the field)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesAPIError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "title must not be empty",
            "details": {"field": "title"}
        }
    """

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


class NotFoundError(NotesAPIError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NoteNotFoundError(NotFoundError):
    """No note exists with the given id."""

    def __init__(self, note_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(resource="note", resource_id=note_id, context=context)
        self.note_id = note_id


class DatabaseError(NotesAPIError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The client always receives a generic message. Constraint names, SQL and
    driver errors stay in `context` and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
