"""
Notes API Backend - Note Service (Business Logic)
=================================================

What:  Application logic between the HTTP routes and the NoteRepository.
How:   Validates input, assigns ids and timestamps on create, delegates to
       the repository and translates persistence errors into domain errors.
Who:   Built per request by `notesapi.dependencies.get_note_service`.

Error translation:
    RecordNotFoundError → NoteNotFoundError (404)
    StorageError        → DatabaseError     (500, generic message)
    ValidationError     → propagated as-is  (400)

NoteService keeps no state besides its repository; every read goes to the store.
"""

import logging
import uuid
from typing import List

from notesapi.exceptions import (
    DatabaseError,
    NoteNotFoundError,
    RecordNotFoundError,
    StorageError,
)
from notesapi.models.note import Note, utcnow, validate_note_fields
from notesapi.repositories.note_repository import NoteRepository
from notesapi.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Note deleted successfully."


class NoteService:
    """
    Note CRUD operations.

    Responsibilities:
        - create_note(): validate, build the entity, insert
        - list_notes():  every stored note, oldest first
        - get_note():    single note or NoteNotFoundError
        - update_note(): validate, replace title/content
        - delete_note(): hard delete
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository

    async def create_note(self, title: str, content: str) -> NoteResponse:
        """
        Create a note with a fresh id; created_at and updated_at are equal.

        Raises:
            ValidationError: title or content missing, blank or too long
            DatabaseError:   the store rejected the insert
        """
        validate_note_fields(title, content)

        now = utcnow()
        note = Note(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        try:
            stored = await self.repository.insert(note)
        except StorageError as e:
            raise self._database_error("Could not create the note. Please try again.", e)

        logger.info("Note created: %s", stored.id)
        return NoteResponse.model_validate(stored)

    async def list_notes(self) -> List[NoteResponse]:
        """Return every note in creation order."""
        try:
            notes = await self.repository.list()
        except StorageError as e:
            raise self._database_error("Could not retrieve notes. Please try again.", e)
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, note_id: str) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NoteNotFoundError: no note with this id
            DatabaseError:     query execution failed
        """
        try:
            note = await self.repository.get(note_id)
        except RecordNotFoundError:
            raise NoteNotFoundError(note_id)
        except StorageError as e:
            raise self._database_error("Could not retrieve the note. Please try again.", e)
        return NoteResponse.model_validate(note)

    async def update_note(self, note_id: str, title: str, content: str) -> NoteResponse:
        """
        Replace title and content of an existing note.

        created_at is untouched; updated_at moves strictly forward.
        Concurrent updates are last-writer-wins.

        Raises:
            ValidationError:   invalid title or content (checked before lookup)
            NoteNotFoundError: no note with this id
            DatabaseError:     the store rejected the update
        """
        validate_note_fields(title, content)
        try:
            note = await self.repository.update(note_id, title, content)
        except RecordNotFoundError:
            raise NoteNotFoundError(note_id)
        except StorageError as e:
            raise self._database_error("Could not update the note. Please try again.", e)

        logger.info("Note updated: %s", note_id)
        return NoteResponse.model_validate(note)

    async def delete_note(self, note_id: str) -> str:
        """
        Permanently remove a note and return the confirmation message.

        Raises:
            NoteNotFoundError: no note with this id
            DatabaseError:     the store rejected the delete
        """
        try:
            await self.repository.delete(note_id)
        except RecordNotFoundError:
            raise NoteNotFoundError(note_id)
        except StorageError as e:
            raise self._database_error("Could not delete the note. Please try again.", e)

        logger.info("Note deleted: %s", note_id)
        return DELETED_MESSAGE

    @staticmethod
    def _database_error(message: str, error: StorageError) -> DatabaseError:
        # Driver details travel in context for the server log only
        return DatabaseError(
            message=message,
            context={"storage_message": error.message, **error.context},
        )
