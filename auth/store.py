"""
CredentialStore — durable persistence of user records and credential lookup.

One store owns one async engine.  The engine's pool is shared by every
concurrent request; each operation is a single statement in its own
short-lived session.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from auth.errors import InitializationError, PersistenceError, UsernameTakenError
from auth.password import verify_password
from database.migrate import run_migrations
from database.models import User
from database.session import create_engine, create_session_factory, ensure_database_location

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    errorname = getattr(exc.orig, "sqlite_errorname", None)
    if errorname is not None:
        return errorname == "SQLITE_CONSTRAINT_UNIQUE"
    return "unique" in str(exc.orig).lower()


class CredentialStore:
    """Async store for the ``users`` table."""

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        accept_legacy_hashes: Optional[bool] = None,
        bcrypt_rounds: Optional[int] = None,
    ) -> None:
        self.database_url = database_url
        self.echo = echo
        self.accept_legacy_hashes = accept_legacy_hashes
        self.bcrypt_rounds = bcrypt_rounds
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise PersistenceError("Credential store is not initialized")
        return self._session_factory

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """
        Create the database if needed, open the pool and apply migrations.

        Raises ``InitializationError`` on any failure; there is no partially
        initialized mode.
        """
        if self._engine is not None:
            return

        engine: Optional[AsyncEngine] = None
        try:
            ensure_database_location(self.database_url)
            engine = create_engine(self.database_url, echo=self.echo)
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            await run_migrations(engine)
        except Exception as exc:
            if engine is not None:
                await engine.dispose()
            logger.error("Credential store initialization failed: %s", exc)
            raise InitializationError(f"Failed to initialize database: {exc}") from exc

        self._engine = engine
        self._session_factory = create_session_factory(engine)
        logger.info("Credential store ready (%s)", engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Credential store closed")

    # ── Operations ──────────────────────────────────────────────────────

    async def create_user(self, username: str, password_hash: str) -> int:
        """Insert one user row and return its assigned id."""
        sessions = self._sessions()
        user = User(username=username, password_hash=password_hash)
        try:
            async with sessions() as session:
                session.add(user)
                await session.commit()
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise UsernameTakenError(username) from exc
            raise PersistenceError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc
        return user.id

    async def find_user(self, username: str, password: str) -> Optional[User]:
        """
        Return the user whose name matches and whose stored hash verifies
        against ``password``; ``None`` when there is no such user.
        """
        sessions = self._sessions()
        try:
            async with sessions() as session:
                result = await session.execute(
                    select(User).where(User.username == username)
                )
                candidates = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise PersistenceError(str(exc)) from exc

        for user in candidates:
            if await run_in_threadpool(
                verify_password, password, user.password_hash, self.accept_legacy_hashes
            ):
                return user
        return None
