"""
Notes API Backend - Note SQLAlchemy Model
=========================================

What:  ORM model for the `notes` table plus the pure field validation that
       every create and update passes through.
How:   Inherits from the shared DeclarativeBase; Alembic's migration 001
       creates the matching table.
Who:   Used by NoteRepository for persistence and by NoteService for validation.

Table Design:
    - id: UUID4 rendered as text. Opaque to clients, generated by the service.
    - title: Short, required, at most TITLE_MAX_LENGTH characters
    - content: Text body, required, at most CONTENT_MAX_LENGTH characters
    - created_at / updated_at: UTC timestamps with timezone

    Index on created_at backs the chronological listing.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notesapi.database import Base
from notesapi.exceptions import ValidationError

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 20_000


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalise a datetime to aware UTC.

    SQLite stores timestamps without an offset, so values read back from it
    are naive. Every timestamp this app writes is UTC, so a naive value is
    tagged as UTC rather than interpreted as local time.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _check_text_field(name: str, value: Optional[str], max_length: int) -> None:
    if value is None:
        raise ValidationError(message=f"{name} is required", field=name)
    if not isinstance(value, str):
        raise ValidationError(message=f"{name} must be a string", field=name)
    if not value.strip():
        raise ValidationError(message=f"{name} must not be empty", field=name)
    if len(value) > max_length:
        raise ValidationError(
            message=f"{name} must be at most {max_length} characters",
            field=name,
            context={"max_length": max_length, "length": len(value)},
        )


def validate_note_fields(title: Optional[str], content: Optional[str]) -> None:
    """
    Check raw note input. Pure: no I/O, no mutation.

    Raises:
        ValidationError: naming the first offending field (title before content)
    """
    _check_text_field("title", title, TITLE_MAX_LENGTH)
    _check_text_field("content", content, CONTENT_MAX_LENGTH)


class Note(Base):
    """
    A single text note.

    Lifecycle:
        1. Created by NoteService.create_note (id and both timestamps assigned)
        2. Title/content replaced by update, updated_at refreshed each time
        3. Hard-deleted; ids are never reused
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="Opaque unique identifier (UUID4 text)",
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        comment="Short note title",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Always written as aware UTC; see ensure_utc for reads from SQLite.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was last changed (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"created_at='{self.created_at}', updated_at='{self.updated_at}')>"
        )
