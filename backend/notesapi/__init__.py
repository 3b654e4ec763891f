"""
Notes API Backend - Application Package Initializer
===================================================

What: Marks the `notesapi` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the console scripts.

Architecture Note:
    The backend is split into layers that only call downwards:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, error translation
    ├─────────────────────────────────────┤
    │     Repositories (Persistence)      │  ← One statement per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Connections)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes handle status codes and headers, services own the note rules,
    repositories own the rows. Each layer receives the one below it through
    FastAPI's dependency injection, so tests can swap any of them.
"""

__version__ = "0.1.0"
