"""
Tests for CredentialStore against a real temp-file SQLite database.
"""

import asyncio

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError
from unittest.mock import patch

from auth.errors import InitializationError, PersistenceError, UsernameTakenError
from auth.password import hash_password, legacy_md5_digest
from auth.store import CredentialStore, _is_unique_violation


class TestInitialize:
    @pytest.mark.asyncio
    async def test_creates_database_and_schema(self, tmp_path):
        db_file = tmp_path / "nested" / "dir" / "auth.db"
        store = CredentialStore(f"sqlite+aiosqlite:///{db_file}")
        await store.initialize()
        try:
            assert db_file.exists()
            assert store.is_initialized
            async with store._engine.connect() as conn:
                tables = (
                    await conn.execute(
                        text("SELECT name FROM sqlite_master WHERE type='table'")
                    )
                ).scalars().all()
                version = (
                    await conn.execute(text("SELECT version_num FROM alembic_version"))
                ).scalar_one()
            assert "users" in tables
            assert version == "0002"
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent_across_restarts(self, database_url):
        first = CredentialStore(database_url)
        await first.initialize()
        user_id = await first.create_user("alice", hash_password("secret"))
        await first.close()

        second = CredentialStore(database_url)
        await second.initialize()
        try:
            user = await second.find_user("alice", "secret")
            assert user is not None
            assert user.id == user_id
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_unknown_driver_raises_initialization_error(self):
        store = CredentialStore("nosuchdb+nosuchdriver:///auth.db")
        with pytest.raises(InitializationError):
            await store.initialize()
        assert not store.is_initialized

    @pytest.mark.asyncio
    async def test_uncreatable_location_raises_initialization_error(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("not a directory")
        store = CredentialStore(f"sqlite+aiosqlite:///{blocker / 'auth.db'}")
        with pytest.raises(InitializationError, match="Failed to initialize database"):
            await store.initialize()

    @pytest.mark.asyncio
    async def test_migration_failure_raises_initialization_error(self, database_url):
        store = CredentialStore(database_url)
        with patch("auth.store.run_migrations", side_effect=RuntimeError("boom")):
            with pytest.raises(InitializationError, match="boom"):
                await store.initialize()
        assert not store.is_initialized


class TestOperations:
    @pytest.mark.asyncio
    async def test_ids_are_assigned_sequentially(self, store):
        first = await store.create_user("alice", hash_password("a"))
        second = await store.create_user("bob", hash_password("b"))
        assert first == 1
        assert second == 2

    @pytest.mark.asyncio
    async def test_find_user_matches_credentials(self, store):
        user_id = await store.create_user("alice", hash_password("secret"))
        user = await store.find_user("alice", "secret")
        assert user is not None
        assert user.id == user_id
        assert user.username == "alice"

    @pytest.mark.asyncio
    async def test_find_user_wrong_password(self, store):
        await store.create_user("alice", hash_password("secret"))
        assert await store.find_user("alice", "wrong") is None

    @pytest.mark.asyncio
    async def test_find_user_unknown_username(self, store):
        assert await store.find_user("nobody", "secret") is None

    @pytest.mark.asyncio
    async def test_username_match_is_exact(self, store):
        await store.create_user("alice", hash_password("secret"))
        assert await store.find_user("Alice", "secret") is None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, store):
        await store.create_user("alice", hash_password("secret"))
        with pytest.raises(UsernameTakenError) as excinfo:
            await store.create_user("alice", hash_password("other"))
        assert isinstance(excinfo.value, PersistenceError)
        assert excinfo.value.username == "alice"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_registration(self, store):
        results = await asyncio.gather(
            store.create_user("alice", hash_password("one")),
            store.create_user("alice", hash_password("two")),
            return_exceptions=True,
        )
        ids = [r for r in results if isinstance(r, int)]
        errors = [r for r in results if isinstance(r, UsernameTakenError)]
        assert len(ids) == 1
        assert len(errors) == 1

    @pytest.mark.asyncio
    async def test_legacy_md5_rows(self, database_url):
        store = CredentialStore(database_url, accept_legacy_hashes=True)
        await store.initialize()
        try:
            user_id = await store.create_user("legacy", legacy_md5_digest("secret"))
            user = await store.find_user("legacy", "secret")
            assert user is not None and user.id == user_id
            store.accept_legacy_hashes = False
            assert await store.find_user("legacy", "secret") is None
        finally:
            await store.close()


class TestFailures:
    @pytest.mark.asyncio
    async def test_uninitialized_store(self, database_url):
        store = CredentialStore(database_url)
        with pytest.raises(PersistenceError, match="not initialized"):
            await store.create_user("alice", "x")
        with pytest.raises(PersistenceError, match="not initialized"):
            await store.find_user("alice", "x")

    @pytest.mark.asyncio
    async def test_closed_store(self, store):
        await store.close()
        await store.close()
        with pytest.raises(PersistenceError):
            await store.find_user("alice", "secret")

    @pytest.mark.asyncio
    async def test_query_failure_wrapped(self, store):
        async with store._engine.begin() as conn:
            await conn.execute(text("DROP TABLE users"))
        with pytest.raises(PersistenceError) as excinfo:
            await store.find_user("alice", "secret")
        assert not isinstance(excinfo.value, UsernameTakenError)
        with pytest.raises(PersistenceError):
            await store.create_user("alice", "x")

    @pytest.mark.asyncio
    async def test_insert_failure_wrapped(self, store):
        err = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch("sqlalchemy.ext.asyncio.AsyncSession.commit", side_effect=err):
            with pytest.raises(PersistenceError, match="disk I/O error") as excinfo:
                await store.create_user("alice", "x")
        assert not isinstance(excinfo.value, UsernameTakenError)


class _DriverError(Exception):
    def __init__(self, message, errorname=None):
        super().__init__(message)
        if errorname is not None:
            self.sqlite_errorname = errorname


class TestUniqueViolation:
    def _integrity_error(self, message, errorname=None):
        return IntegrityError("INSERT", {}, _DriverError(message, errorname))

    def test_error_name_decides_when_present(self):
        assert _is_unique_violation(
            self._integrity_error("constraint failed", "SQLITE_CONSTRAINT_UNIQUE")
        )
        assert not _is_unique_violation(
            self._integrity_error("UNIQUE-looking text", "SQLITE_CONSTRAINT_NOTNULL")
        )

    def test_message_fallback_without_error_name(self):
        assert _is_unique_violation(
            self._integrity_error("UNIQUE constraint failed: users.username")
        )
        assert not _is_unique_violation(
            self._integrity_error("NOT NULL constraint failed: users.username")
        )

    @pytest.mark.asyncio
    async def test_not_null_violation_is_plain_persistence_error(self, store):
        with pytest.raises(PersistenceError) as excinfo:
            await store.create_user(None, "x")
        assert not isinstance(excinfo.value, UsernameTakenError)
