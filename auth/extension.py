"""
AuthExtension — SQLite-backed register/login routes as a host extension.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends

from auth.dependencies import attach_store
from auth.routes import router as auth_router
from auth.store import CredentialStore
from config.settings import Settings, config
from extensions.base import BaseExtension, RouterT

logger = logging.getLogger(__name__)


class AuthExtension(BaseExtension):
    """Adds ``/register`` and ``/login`` backed by a ``CredentialStore``."""

    def __init__(self, store: CredentialStore, prefix: str = "") -> None:
        self.store = store
        self.prefix = prefix

    @property
    def name(self) -> str:
        return "AuthExtensionSQLite"

    def extend(self, router: RouterT) -> RouterT:
        router.include_router(
            auth_router,
            prefix=self.prefix,
            dependencies=[Depends(attach_store(self.store))],
        )
        logger.info("Auth routes mounted at %s/register and %s/login", self.prefix, self.prefix)
        return router

    async def startup(self) -> None:
        await self.store.initialize()

    async def shutdown(self) -> None:
        await self.store.close()


def create_auth_extension(settings: Optional[Settings] = None) -> AuthExtension:
    """Build an extension whose store is initialized on ``startup``."""
    settings = settings or config
    store = CredentialStore(
        settings.database_url,
        echo=settings.database_echo,
        accept_legacy_hashes=settings.accept_legacy_md5_hashes,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    return AuthExtension(store, prefix=settings.auth_route_prefix)


async def create_initialized_auth_extension(
    settings: Optional[Settings] = None,
) -> AuthExtension:
    """
    Build the extension and initialize its store immediately.

    Raises ``InitializationError`` if the database cannot be prepared.
    """
    extension = create_auth_extension(settings)
    await extension.store.initialize()
    return extension
