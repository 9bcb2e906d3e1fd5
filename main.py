"""
Auth extension host — application entry point.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from auth.extension import create_auth_extension
from config.settings import Settings, config
from extensions.base import BaseExtension
from extensions.registry import ExtensionRegistry

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("aiosqlite", "alembic.runtime.migration", "sqlalchemy.engine"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    extensions: Optional[Iterable[BaseExtension]] = None,
) -> FastAPI:
    settings = settings or config
    registry = ExtensionRegistry()
    if extensions is None:
        extensions = [create_auth_extension(settings)]
    for ext in extensions:
        registry.register(ext)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting extensions: %s", ", ".join(registry.list_names()))
        await registry.startup()
        logger.info("Application ready to accept requests.")
        yield
        await registry.shutdown()

    app = FastAPI(
        title="Auth Extension Host",
        version="1.0.0",
        description="Register / login over a SQLite credential store.",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        level = logging.WARNING if response.status_code >= 500 else logging.DEBUG
        logger.log(
            level,
            "%s %s → %d — %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    # Routes
    registry.apply(app)
    app.state.extensions = registry

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
