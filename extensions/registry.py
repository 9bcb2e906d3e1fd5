"""
ExtensionRegistry — keeps the extensions a host has loaded and applies them.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from extensions.base import BaseExtension, RouterT

logger = logging.getLogger(__name__)


class ExtensionRegistry:
    """Ordered registry of extensions for one host application."""

    def __init__(self) -> None:
        self._extensions: Dict[str, BaseExtension] = {}
        self._started: List[BaseExtension] = []

    def register(self, extension: BaseExtension) -> None:
        """Add an extension; names must be unique."""
        if extension.name in self._extensions:
            raise ValueError(f"Extension '{extension.name}' is already registered")
        self._extensions[extension.name] = extension
        logger.info("Extension registered: %s", extension.name)

    def get(self, name: str) -> Optional[BaseExtension]:
        """Get an extension by name."""
        return self._extensions.get(name)

    def list_names(self) -> List[str]:
        """Return names in registration order."""
        return list(self._extensions.keys())

    def apply(self, router: RouterT) -> RouterT:
        """Let every registered extension add its routes to ``router``."""
        for ext in self._extensions.values():
            router = ext.extend(router)
            logger.debug("Extension %s applied", ext.name)
        return router

    async def startup(self) -> None:
        """
        Run startup hooks in registration order.

        A failing hook propagates; extensions started before it are shut
        down again first.
        """
        for ext in self._extensions.values():
            try:
                await ext.startup()
            except Exception:
                logger.error("Extension %s failed to start", ext.name)
                await self.shutdown()
                raise
            self._started.append(ext)

    async def shutdown(self) -> None:
        """Run shutdown hooks for started extensions, newest first."""
        while self._started:
            ext = self._started.pop()
            try:
                await ext.shutdown()
            except Exception:
                logger.exception("Extension %s failed to shut down", ext.name)
