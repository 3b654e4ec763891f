"""
FastAPI dependency chain for the notes routes.

    get_db_session → get_note_repository → get_note_service

Tests override any link through `app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notesapi.database import get_db_session
from notesapi.repositories.note_repository import NoteRepository
from notesapi.services.note_service import NoteService


def get_note_repository(session: AsyncSession = Depends(get_db_session)) -> NoteRepository:
    return NoteRepository(session)


def get_note_service(repository: NoteRepository = Depends(get_note_repository)) -> NoteService:
    return NoteService(repository)
