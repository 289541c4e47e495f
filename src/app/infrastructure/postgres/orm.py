from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import DateTime, Enum, String, Text, Uuid
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.app.domain.models.payloads import TITLE_MAX_LENGTH
from src.app.domain.models.task_priority import TaskPriority
from src.app.domain.models.task_status import TaskStatus


def _enum_values(enum_cls: type[Any]) -> list[str]:
    return [member.value for member in enum_cls]


class Base(DeclarativeBase):
    pass


class TaskRow(Base):
    __tablename__ = "tasks"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="task_status", values_callable=_enum_values),
        nullable=False,
        default=TaskStatus.TODO,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, name="task_priority", values_callable=_enum_values),
        nullable=False,
    )
    assigned_to: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class PostgresOrm:
    """
    SQLAlchemy async ORM holder. Create once and inject where needed.

    Pool sizing, connect timeout and TLS only apply to PostgreSQL URLs; other
    backends (SQLite in tests) keep SQLAlchemy's default pool for the dialect.
    """

    def __init__(
        self,
        database_url: str,
        *,
        echo: bool = False,
        max_connections: int = 20,
        connect_timeout: float = 2.0,
        ssl: bool = False,
    ) -> None:
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if make_url(database_url).get_backend_name() == "postgresql":
            connect_args: dict[str, Any] = {"timeout": connect_timeout}
            if ssl:
                connect_args["ssl"] = "require"
            engine_kwargs.update(
                pool_size=max_connections,
                max_overflow=0,
                pool_timeout=connect_timeout,
                connect_args=connect_args,
            )
        self._engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    async def create_schema(self) -> None:
        """Create missing tables directly; deployments use Alembic migrations instead."""
        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
