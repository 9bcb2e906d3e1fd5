"""
Shared fixtures: temp-file SQLite databases and fast bcrypt.
"""

import pytest
import pytest_asyncio

from auth.store import CredentialStore
from config.settings import Settings, config


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Minimum bcrypt work factor so hashing doesn't dominate test time."""
    monkeypatch.setattr(config, "bcrypt_rounds", 4)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}"


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(database_url=database_url, bcrypt_rounds=4, debug=False)


@pytest_asyncio.fixture
async def store(database_url):
    s = CredentialStore(database_url)
    await s.initialize()
    yield s
    await s.close()
