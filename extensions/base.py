"""
BaseExtension — abstract interface for all host-router extensions.

The host calls ``extend`` once while building its router and awaits the
lifecycle hooks from its lifespan.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypeVar, Union

from fastapi import APIRouter, FastAPI

RouterT = TypeVar("RouterT", bound=Union[APIRouter, FastAPI])


class BaseExtension(ABC):
    """Abstract base for all extensions."""

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name, e.g. 'AuthExtensionSQLite'."""
        ...

    # ── Routing ─────────────────────────────────────────────────────────

    @abstractmethod
    def extend(self, router: RouterT) -> RouterT:
        """
        Register this extension's routes on ``router``.

        Parameters
        ----------
        router : APIRouter | FastAPI
            The host router.  Shared state the handlers need is attached
            through dependencies, not through the router's type.

        Returns
        -------
        The same router, so calls can be chained.
        """
        ...

    # ── Lifecycle ───────────────────────────────────────────────────────

    async def startup(self) -> None:
        """Acquire resources before the first request (optional)."""
        return None

    async def shutdown(self) -> None:
        """Release resources after the last request (optional)."""
        return None
