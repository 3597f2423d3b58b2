"""FastAPI application for the PRify JSON API."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..db.engine import init_db, seed_library
from ..exceptions import (
    DuplicateError,
    NotAuthenticatedError,
    NotFoundError,
    PrifyError,
    RecordSyncError,
)
from .routers import library, records, statistics, workouts

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    if db_path is None:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        db_path = settings.db_path

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown."""
        # Startup: make sure the schema and default library exist
        if not db_path.exists():
            await init_db(db_path)
            await seed_library(db_path)
        yield

    app = FastAPI(
        title="PRify",
        description="Workout log and personal record tracker",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_path = db_path

    app.include_router(workouts.router)
    app.include_router(workouts.exercise_router)
    app.include_router(workouts.set_router)
    app.include_router(records.router)
    app.include_router(statistics.router)
    app.include_router(library.router)

    @app.exception_handler(PrifyError)
    async def prify_error_handler(request: Request, exc: PrifyError):
        status_code = 400
        if isinstance(exc, NotAuthenticatedError):
            status_code = 401
        elif isinstance(exc, NotFoundError):
            status_code = 404
        elif isinstance(exc, DuplicateError):
            status_code = 409
        elif isinstance(exc, RecordSyncError):
            status_code = 500
            logger.error("Record sync failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=status_code)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(aiosqlite.Error)
    async def database_error_handler(request: Request, exc: aiosqlite.Error):
        logger.error("Database error on %s: %s", request.url.path, exc)
        return JSONResponse({"error": "Database error, please try again."}, status_code=503)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
