"""
Notes API Backend - Notes Route Handlers
========================================

What:  The five CRUD endpoints under /api/v1/notes.
How:   Decode body/path, call NoteService, return the schema. Error statuses
       come from the exception handlers in main.py, so handlers stay linear.
Who:   Any HTTP client; also documented in the generated OpenAPI schema.

Route Inventory:
    POST   /api/v1/notes            → 201 NoteResponse
    GET    /api/v1/notes            → 200 [NoteResponse]
    GET    /api/v1/notes/{note_id}  → 200 NoteResponse
    PUT    /api/v1/notes/{note_id}  → 200 NoteResponse
    DELETE /api/v1/notes/{note_id}  → 200 MessageResponse
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from notesapi.dependencies import get_note_service
from notesapi.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from notesapi.services.note_service import NoteService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix=API_PREFIX, tags=["notes"])

_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Note not found by id", "model": ErrorResponse}}
_NOT_VALID = {400: {"description": "Note not valid", "model": ErrorResponse}}


@router.post(
    "/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_NOT_VALID, **_SERVER_ERROR},
    summary="Create a note",
    description="Stores a new note. The server assigns `id`, `createdAt` and `updatedAt`.",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.create_note(title=payload.title, content=payload.content)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses=_SERVER_ERROR,
    summary="List notes",
    description="Returns every note, oldest first. `X-Total-Count` carries the number of notes.",
)
async def list_notes(
    response: Response,
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    notes = await service.list_notes()
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a note",
)
async def get_note(
    note_id: str = Path(description="Unique id"),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.get_note(note_id)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_VALID, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a note",
    description="Replaces title and content. `createdAt` is kept, `updatedAt` is refreshed.",
)
async def put_note(
    payload: NoteUpdate,
    note_id: str = Path(description="Unique id"),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.update_note(note_id, title=payload.title, content=payload.content)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: str = Path(description="Unique id"),
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    message = await service.delete_note(note_id)
    return MessageResponse(message=message)
