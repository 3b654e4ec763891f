"""
Notes API Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, one fresh database per test):
    database_url           SQLite file in tmp_path, migrated with Alembic
    ├── test_settings      Settings pointing at that file
    │   ├── database       Database handle (engine + session factory)
    │   │   └── db_session / repository
    │   └── app            FastAPI app built by create_app(test_settings)
    │       └── test_client  HTTPX AsyncClient over ASGITransport
    mock_db_session        AsyncMock session for failure paths
    mock_repository        AsyncMock NoteRepository for service unit tests
"""

import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any notesapi import: the module-level settings read these
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from notesapi.config import Settings  # noqa: E402
from notesapi.database import Database  # noqa: E402
from notesapi.main import create_app  # noqa: E402
from notesapi.migrate import upgrade_database_async  # noqa: E402
from notesapi.models.note import Note  # noqa: E402
from notesapi.repositories.note_repository import NoteRepository  # noqa: E402

T0 = datetime(2026, 10, 19, 9, 30, 0, 123456, tzinfo=timezone.utc)


def make_note(note_id: str = "n1", title: str = "Groceries", content: str = "milk, eggs",
              created_at: datetime = T0) -> Note:
    """Transient Note with both timestamps set to `created_at`."""
    return Note(
        id=note_id,
        title=title,
        content=content,
        created_at=created_at,
        updated_at=created_at,
    )


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database_url(tmp_path) -> str:
    """URL of a fresh SQLite database with every migration applied."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}"
    await upgrade_database_async(url)
    return url


@pytest.fixture
def test_settings(database_url) -> Settings:
    return Settings(
        database_url=database_url,
        run_migrations_on_startup=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings) -> AsyncGenerator[Database, None]:
    db = Database(test_settings)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def repository(db_session) -> NoteRepository:
    return NoteRepository(db_session)


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.commit.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_repository():
    """AsyncMock standing in for NoteRepository; inserts echo the note back."""
    repo = AsyncMock(spec=NoteRepository)
    repo.insert.side_effect = lambda note: note
    return repo


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def note_payload():
    return {"title": "Groceries", "content": "milk, eggs"}


def parse_timestamp(value: str) -> datetime:
    """ISO 8601 from the API ('Z' suffix included) to an aware datetime."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


ONE_MICROSECOND = timedelta(microseconds=1)
