"""
Notes API Backend - Migration Runner
====================================

What:  Applies the ordered Alembic revisions in `notesapi/migrations/versions`.
How:   Builds an Alembic Config in code (no alembic.ini needed), points it at
       the packaged migration scripts and the given connection string, and
       runs `upgrade head`.
Who:   The application lifespan (when RUN_MIGRATIONS_ON_STARTUP is true),
       the `notesapi-migrate` console script and the test fixtures.

env.py drives an async engine with `asyncio.run`, which cannot be nested in
a running event loop. Async callers use `upgrade_database_async`, which
runs the upgrade in a worker thread.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config

from notesapi.config import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def alembic_config(database_url: str) -> Config:
    """Alembic Config for the packaged migrations against `database_url`."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation: a literal % (e.g. in a password) must be doubled
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def upgrade_database(database_url: Optional[str] = None, revision: str = "head") -> None:
    """Apply every pending migration up to `revision`. Blocking."""
    url = database_url or settings.database_url
    logger.info("Applying database migrations (target: %s)", revision)
    command.upgrade(alembic_config(url), revision)
    logger.info("Database schema is up to date")


async def upgrade_database_async(database_url: Optional[str] = None, revision: str = "head") -> None:
    """`upgrade_database` for code already running inside an event loop."""
    await asyncio.to_thread(upgrade_database, database_url, revision)


def main() -> None:
    """Entry point of the `notesapi-migrate` console script."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    upgrade_database()


if __name__ == "__main__":
    main()
