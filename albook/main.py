"""FastAPI application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from albook import __version__
from albook.api.router import api_router
from albook.config import Settings, settings as default_settings
from albook.db import session as db_session
from albook.db.migrate import upgrade_database
from albook.utils.exceptions import AlbookError, to_http_exception


tags_metadata: List[dict[str, str]] = [
    {"name": "exercises", "description": "Create, edit, list and review exercises."},
    {"name": "dashboard", "description": "Counters for the list views."},
]


def create_app(app_settings: Settings | None = None, *, run_migrations: bool | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app_settings = app_settings or default_settings
    if run_migrations is None:
        run_migrations = app_settings.RUN_MIGRATIONS_ON_STARTUP

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_migrations:
            upgrade_database(db_session.engine.url.render_as_string(hide_password=False))
        yield

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="Spaced-repetition tracker for solved exercises.",
        version=__version__,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"Validation failed on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors()), "message": "Validation failed"},
        )

    @app.exception_handler(AlbookError)
    async def albook_exception_handler(request: Request, exc: AlbookError) -> JSONResponse:
        http_exc = to_http_exception(exc)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    app.include_router(api_router, prefix=app_settings.API_PREFIX)

    if app_settings.STATIC_DIR is not None:
        if app_settings.STATIC_DIR.is_dir():
            app.mount("/", StaticFiles(directory=str(app_settings.STATIC_DIR), html=True), name="static")
        else:
            logger.warning(f"Static directory {app_settings.STATIC_DIR} not found, web client disabled")

    return app


app = create_app()
