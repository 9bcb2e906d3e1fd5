"""
Error kinds raised by the credential store.

``InitializationError`` is fatal and aborts startup.  ``PersistenceError``
is recovered at the handler boundary and turned into an error response.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for auth extension errors."""


class InitializationError(AuthError):
    """Database could not be created, reached, or migrated."""


class PersistenceError(AuthError):
    """A query or connection failed while serving a request."""


class UsernameTakenError(PersistenceError):
    """Insert rejected by the unique index on ``users.username``."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already taken")
