"""
Notes API Backend - Note Repository (Persistence Adapter)
=========================================================

What:  The only component that reads or writes note rows.
How:   Wraps one AsyncSession. Every write is committed before returning, so
       each call is a single-statement transaction; on failure the session
       is rolled back and the error is wrapped in StorageError.
Who:   Built per request by `notesapi.dependencies.get_note_repository` and
       called by NoteService.

Query plans:
    get / update / delete: primary key lookup
    list:                  SELECT ... ORDER BY created_at, id (idx_notes_created_at)
"""

import logging
from datetime import timedelta
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notesapi.exceptions import RecordNotFoundError, StorageError
from notesapi.models.note import Note, ensure_utc, utcnow

logger = logging.getLogger(__name__)

# Smallest step both SQLite and PostgreSQL timestamps can represent
_TIMESTAMP_RESOLUTION = timedelta(microseconds=1)


class NoteRepository:
    """
    CRUD adapter over the `notes` table.

    Error contract:
        RecordNotFoundError: get/update/delete with an unknown id
        StorageError:        any SQLAlchemy failure (connectivity, constraint)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, note: Note) -> Note:
        """Store a fully-populated note and return it."""
        try:
            self.session.add(note)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error("Insert of note %s failed: %s", note.id, str(e))
            raise StorageError(
                message="Could not store the note",
                context={"note_id": note.id, "original_error": str(e)},
            ) from e
        logger.debug("Inserted note %s", note.id)
        return note

    async def get(self, note_id: str) -> Note:
        """Return the note with `note_id` or raise RecordNotFoundError."""
        return await self._load(note_id)

    async def update(self, note_id: str, title: str, content: str) -> Note:
        """
        Replace title and content and refresh updated_at.

        updated_at always moves strictly forward, even if the clock has not
        advanced since the previous write.
        """
        note = await self._load(note_id)
        previous = ensure_utc(note.updated_at)
        now = utcnow()
        if now <= previous:
            now = previous + _TIMESTAMP_RESOLUTION

        note.title = title
        note.content = content
        note.updated_at = now
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error("Update of note %s failed: %s", note_id, str(e))
            raise StorageError(
                message="Could not update the note",
                context={"note_id": note_id, "original_error": str(e)},
            ) from e
        logger.debug("Updated note %s", note_id)
        return note

    async def delete(self, note_id: str) -> Note:
        """Hard-delete the note and return the removed row."""
        note = await self._load(note_id)
        try:
            await self.session.delete(note)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._rollback()
            logger.error("Delete of note %s failed: %s", note_id, str(e))
            raise StorageError(
                message="Could not delete the note",
                context={"note_id": note_id, "original_error": str(e)},
            ) from e
        logger.debug("Deleted note %s", note_id)
        return note

    async def list(self) -> List[Note]:
        """All notes, oldest first (ties broken by id)."""
        try:
            result = await self.session.execute(
                select(Note).order_by(Note.created_at.asc(), Note.id.asc())
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Listing notes failed: %s", str(e))
            raise StorageError(
                message="Could not list notes",
                context={"original_error": str(e)},
            ) from e
        return notes

    # ── Internals ─────────────────────────────────────────────────────────

    async def _load(self, note_id: str) -> Note:
        try:
            note = await self.session.get(Note, note_id)
        except SQLAlchemyError as e:
            logger.error("Loading note %s failed: %s", note_id, str(e))
            raise StorageError(
                message="Could not read the note",
                context={"note_id": note_id, "original_error": str(e)},
            ) from e
        if note is None:
            raise RecordNotFoundError(note_id)
        return note

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            logger.warning("Rollback failed: %s", str(e))

