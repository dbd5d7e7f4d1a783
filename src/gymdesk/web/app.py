"""FastAPI application for the gymdesk HTTP API."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..db.engine import get_db_path, init_db
from ..errors import GymdeskError
from .routers import members, payments, sessions, subscriptions, trainers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Startup: initialize the database on first run
    db_path = app.state.db_path
    if not db_path.exists():
        await init_db(db_path)
    yield


async def gymdesk_error_handler(request: Request, exc: GymdeskError) -> JSONResponse:
    """Render gymdesk errors as JSON with their HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Database file to serve. Defaults to the configured path.
    """
    app = FastAPI(
        title="gymdesk",
        description="Gym studio administration API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db_path = db_path or get_db_path()

    app.add_exception_handler(GymdeskError, gymdesk_error_handler)

    # Include routers
    app.include_router(members.router)
    app.include_router(subscriptions.router)
    app.include_router(payments.router)
    app.include_router(trainers.router)
    app.include_router(sessions.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
