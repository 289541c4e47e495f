import inject

from src.app.application.services import TaskService
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.postgres.orm import PostgresOrm
from src.app.infrastructure.postgres.repositories import PostgresTaskRepository
from src.setup.db_config import DatabaseSettings, get_database_settings


def build_orm(settings: DatabaseSettings) -> PostgresOrm:
    return PostgresOrm(
        settings.url,
        echo=settings.DB_ECHO,
        max_connections=settings.DB_MAX_CONNECTIONS,
        connect_timeout=settings.DB_CONNECT_TIMEOUT,
        ssl=settings.DB_SSL,
    )


def configure_di(settings: DatabaseSettings | None = None) -> None:
    """Build the storage stack once and bind it into the DI container."""
    if settings is None:
        settings = get_database_settings()
    orm = build_orm(settings)
    repository = PostgresTaskRepository(orm)
    service = TaskService(repository)

    def _config(binder: inject.Binder) -> None:
        binder.bind(PostgresOrm, orm)
        binder.bind(TaskRepository, repository)
        binder.bind(TaskService, service)

    inject.clear_and_configure(_config)
