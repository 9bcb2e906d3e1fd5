"""
Apply Alembic revisions to the credential database at startup.

The migration environment is configured in code (no ``alembic.ini``) and
runs on the connection handed over by the async engine.
"""

from __future__ import annotations

import logging
import pathlib

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = pathlib.Path(__file__).resolve().parent / "migrations"


def _alembic_config(connection: Connection) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.attributes["connection"] = connection
    return cfg


def _upgrade(connection: Connection, revision: str) -> None:
    command.upgrade(_alembic_config(connection), revision)


async def run_migrations(engine: AsyncEngine, revision: str = "head") -> None:
    """Upgrade the database behind ``engine`` to ``revision``."""
    logger.info("Applying migrations up to %s", revision)
    async with engine.begin() as conn:
        await conn.run_sync(_upgrade, revision)
    logger.info("Database schema is up to date")
