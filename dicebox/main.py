from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from dicebox.backend import check_connection, resolve_backend
from dicebox.config import Settings, load_settings
from dicebox.logging_config import setup_logging
from dicebox.routers import pages, rolls

logger = logging.getLogger(__name__)

HOST = "0.0.0.0"
PORT = 80


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = getattr(app.state, "settings", None) or load_settings()
    backend = resolve_backend(settings)
    check_connection(backend)

    app.state.settings = settings
    app.state.backend = backend
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Settings not given here are loaded at startup."""
    app = FastAPI(title="Dicebox", lifespan=lifespan)
    if settings is not None:
        app.state.settings = settings

    app.include_router(pages.router)
    app.include_router(rolls.router)
    return app


app = create_app()


def main() -> None:
    """Serve dicebox on all interfaces, port 80.

    Configuration is loaded before the server starts so a missing TABLE_NAME
    aborts the process without binding the port.
    """
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("Starting dicebox, writing rolls to table %s", settings.table_name)
    uvicorn.run(create_app(settings), host=HOST, port=PORT, log_config=None)
