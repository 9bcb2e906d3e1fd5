"""
FastAPI dependencies for the auth routes.

The extension attaches its store to ``request.state`` through a
router-level dependency; handlers read it back with
``get_credential_store``.
"""

from __future__ import annotations

from fastapi import Request

from auth.store import CredentialStore

STATE_KEY = "credential_store"


def attach_store(store: CredentialStore):
    """Build a router-level dependency that exposes ``store`` to handlers."""

    async def _attach(request: Request) -> None:
        setattr(request.state, STATE_KEY, store)

    return _attach


def get_credential_store(request: Request) -> CredentialStore:
    """Return the store attached for this request."""
    store = getattr(request.state, STATE_KEY, None)
    if store is None:
        raise RuntimeError("Auth routes are mounted without an AuthExtension")
    return store
