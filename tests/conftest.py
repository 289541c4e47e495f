from __future__ import annotations

import inject
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.application.services import TaskService
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.postgres.orm import PostgresOrm
from src.app.infrastructure.postgres.repositories import PostgresTaskRepository
from src.app.presentation.app import create_app
from src.setup.api_config import ApiSettings
from tests.fakes import FailingTaskRepository, InMemoryTaskRepository


def _bind_service(service: TaskService) -> None:
    def _config(binder: inject.Binder) -> None:
        binder.bind(TaskService, service)

    inject.clear_and_configure(_config)


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(APP_NAME="Test API", APP_VERSION="0.1.0")


@pytest.fixture
async def orm(tmp_path):
    """SQLite-backed ORM with the tasks table created; one file per test."""
    orm = PostgresOrm(f"sqlite+aiosqlite:///{tmp_path / 'tasks.sqlite3'}")
    await orm.create_schema()
    yield orm
    await orm.dispose()


@pytest.fixture
def repository(orm: PostgresOrm) -> PostgresTaskRepository:
    return PostgresTaskRepository(orm)


@pytest.fixture
def memory_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def service(memory_repository: InMemoryTaskRepository) -> TaskService:
    return TaskService(memory_repository)


def _build_app(repository: TaskRepository, settings: ApiSettings) -> FastAPI:
    _bind_service(TaskService(repository))
    return create_app(settings)


@pytest.fixture
def api_client(memory_repository: InMemoryTaskRepository, api_settings: ApiSettings):
    """FastAPI test client with the service wired to the in-memory repository."""
    client = TestClient(_build_app(memory_repository, api_settings))
    yield client, memory_repository
    inject.clear()


@pytest.fixture
def failing_api_client(api_settings: ApiSettings):
    client = TestClient(_build_app(FailingTaskRepository(), api_settings))
    yield client
    inject.clear()


@pytest.fixture
def sqlite_app(repository: PostgresTaskRepository, api_settings: ApiSettings):
    """App over the real SQLAlchemy repository, for httpx ASGI transport tests."""
    app = _build_app(repository, api_settings)
    yield app
    inject.clear()
