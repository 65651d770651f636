"""
FastAPI application for Release Control Tower.
"""

from __future__ import annotations

import importlib.metadata
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .db.base import Database, get_database
from .logging_setup import configure_logging
from .releases.errors import ReleaseError
from .releases.routes import router as releases_router

logger = structlog.get_logger()

PACKAGE_NAME = "release-control-tower"


def create_app(
    settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    """Build the application.

    ``database`` defaults to one built from ``settings``; it is initialized
    on startup and, when built here, shut down on exit.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        configure_logging(settings.log_level, settings.log_format)
        logger.info("Starting Release Control Tower", environment=settings.environment)

        owns_database = database is None
        db = database or Database.from_settings(settings)
        try:
            db.initialize()
            if settings.db_auto_create:
                db.create_all()
            logger.info("Database initialized")
        except Exception as e:
            logger.error("Failed to start application", error=str(e))
            raise

        app.state.database = db
        yield

        logger.info("Shutting down Release Control Tower")
        if owns_database:
            db.shutdown()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        description="Client update distribution and release rollout control",
        version=importlib.metadata.version(PACKAGE_NAME),
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ReleaseError, release_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(releases_router)

    @app.get("/healthz", tags=["system"])
    def healthz(database: Database = Depends(get_database)) -> dict:
        """Health check endpoint, including database connectivity."""
        db_ok = database.ping()
        return {"status": "ok" if db_ok else "degraded", "db": db_ok}

    @app.get("/version", tags=["system"])
    def version() -> dict[str, str]:
        """Return the version of the application."""
        return {"version": importlib.metadata.version(PACKAGE_NAME)}

    return app


async def release_error_handler(request: Request, exc: ReleaseError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request failed",
        code=exc.code,
        release_id=exc.release_id,
        path=request.url.path,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema failures as 400 like every other validation error."""
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("Request rejected", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request parameters",
            "details": details,
        },
    )


app = create_app()
