"""
Notes API Backend - Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and builds the OpenAPI document from them.
Who:   Used by route handlers and returned by NoteService.

JSON keys are camelCase on the wire (`createdAt`, `updatedAt`) through an
alias generator; Python code uses snake_case attribute names.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notesapi.middleware.request_id import request_id_var
from notesapi.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, ensure_utc


# ══════════════════════════════════════════════════════════════════════════
# Request Models - What clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteFields(BaseModel):
    """
    Title and content shared by the create and update bodies.

    Constraints are declared on the fields and checked before the handler
    runs; failures are answered with 400 by the RequestValidationError
    handler in main.py.
    """
    title: str = Field(
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Title of the note",
        examples=["Groceries"],
    )
    content: str = Field(
        min_length=1,
        max_length=CONTENT_MAX_LENGTH,
        description="Content of the note",
        examples=["milk, eggs"],
    )

    @field_validator("title", "content")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Whitespace-only values count as empty."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class NoteCreate(NoteFields):
    """Body of POST /api/v1/notes."""


class NoteUpdate(NoteFields):
    """Body of PUT /api/v1/notes/{id}. Both fields are replaced."""


# ══════════════════════════════════════════════════════════════════════════
# Response Models - What the API returns
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a note.

    Returned by create, get, update and (as array items) list.
    """
    id: str = Field(
        description="Unique id",
        examples=["14322988-32fe-447c-ac38-06fb6c699b4a"],
    )
    title: str = Field(description="Title of the note", examples=["Note 1"])
    content: str = Field(description="Content of the note", examples=["This is note #1."])
    created_at: datetime = Field(description="Date of creation (UTC ISO 8601)")
    updated_at: datetime = Field(description="Date of last update (UTC ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        """Timestamps are always reported as aware UTC."""
        return ensure_utc(v)


class MessageResponse(BaseModel):
    """Plain confirmation body, e.g. after a delete."""
    message: str = Field(description="Human-readable message", examples=["Note deleted successfully."])


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models - Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "title: must not be empty",
            "details": {"field": "title"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again or contact support."


def error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    """The ErrorResponse shape as a plain dict, tagged with the current request ID."""
    body = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

