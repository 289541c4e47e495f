from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import inject
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.app.domain.exceptions import StorageError
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.postgres.orm import PostgresOrm
from src.app.presentation.health import router as health_router
from src.app.presentation.routes import INVALID_TASK_DATA, error_response
from src.app.presentation.routes import router as tasks_router
from src.setup.api_config import ApiSettings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Connectivity is checked once; a dead database at boot stops the process.
    repository = inject.instance(TaskRepository)
    try:
        await repository.ping()
    except StorageError:
        logger.critical("Failed to connect to database, shutting down")
        raise SystemExit(1)  # noqa: B904
    logger.info("Database connection established successfully")
    try:
        yield
    finally:
        logger.info("Closing database connections")
        await inject.instance(PostgresOrm).dispose()


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        "Rejected malformed request",
        extra={"path": request.url.path, "errors": len(exc.errors())},
    )
    return error_response(400, INVALID_TASK_DATA)


def create_app(settings: ApiSettings) -> FastAPI:
    """Build the API; DI must already be configured before the app starts serving."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Task board API: CRUD over tasks moving through kanban columns",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health_router)
    app.include_router(tasks_router, prefix=settings.API_PREFIX)
    return app
