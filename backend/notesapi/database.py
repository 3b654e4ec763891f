"""
Notes API Backend - Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns one engine and one session factory. The
       application factory creates it from Settings and stores it on
       `app.state.database`; `get_db_session` pulls it from there for each
       request. Nothing in this module holds a process-wide engine, so every
       test can build its own isolated Database.
Who:   Used by route dependencies, the health check and the test suite.
When:  Database is created with the app; sessions are created per request.

Connection Pooling:
    Server databases (PostgreSQL via asyncpg) get a sized QueuePool with
    pre-ping and hourly recycling. SQLite uses SQLAlchemy's default pool for
    the aiosqlite driver and none of the sizing options.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notesapi.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads in env.py.
    """
    pass


def engine_options(settings: Settings) -> Dict[str, Any]:
    """
    Build keyword arguments for `create_async_engine` from Settings.

    SQLite pools reject the sizing arguments, so they are only passed for
    server databases.
    """
    options: Dict[str, Any] = {
        # Echo SQL only when debugging
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Handle on the note store: one engine plus its session factory.

    Attributes:
        engine:          AsyncEngine managing the connection pool
        session_factory: async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **engine_options(settings)
        )
        # expire_on_commit=False keeps attributes readable after commit,
        # outside of any lazy-load context.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def ping(self) -> bool:
        """Run `SELECT 1`; returns False instead of raising when the store is down."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Looks up the Database created by the application factory
        2. Opens a session and yields it to the repository
        3. On error: rolls back anything left uncommitted, then re-raises
        4. Always: closes the session (returns the connection to the pool)

    Commits are issued by the repository after each write, so every
    operation is its own transaction.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise  # Re-raise so the global error handler can respond
        finally:
            await session.close()
