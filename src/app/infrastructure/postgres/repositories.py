from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.domain.exceptions import StorageError
from src.app.domain.models.payloads import TaskCreate
from src.app.domain.models.task import Task
from src.app.domain.repositories import TaskRepository
from src.app.infrastructure.postgres.mappers import OrmMapper
from src.app.infrastructure.postgres.orm import PostgresOrm, TaskRow

logger = logging.getLogger(__name__)

_PATCHABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "assigned_to", "due_date"}
)


def _after(previous: datetime | None) -> datetime:
    """Current UTC time, bumped past ``previous`` when the clock has not moved on."""
    now = datetime.now(UTC)
    if previous is None:
        return now
    return max(now, OrmMapper.as_utc(previous) + timedelta(microseconds=1))


class PostgresTaskRepository(TaskRepository):
    """Postgres-backed task storage using SQLAlchemy async sessions."""

    def __init__(self, orm: PostgresOrm) -> None:
        self._orm = orm

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        # One pooled connection per call, returned on every exit path.
        try:
            async with self._orm.session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "Task storage operation failed",
                extra={"operation": operation, "error": type(exc).__name__},
            )
            raise StorageError(operation) from exc

    async def create(self, payload: TaskCreate) -> Task:
        """Persist a new task and return the stored record."""
        async with self._session("create") as session:
            async with session.begin():
                # created_at strictly increases so newest-first paging has no ties.
                latest = await session.scalar(select(func.max(TaskRow.created_at)))
                task_row = OrmMapper.to_task_row(uuid4(), payload, _after(latest))
                session.add(task_row)
        return OrmMapper.to_domain_task(task_row)

    async def find_by_id(self, task_id: UUID) -> Task | None:
        async with self._session("find_by_id") as session:
            task_row = await session.get(TaskRow, task_id)
        if task_row is None:
            return None
        return OrmMapper.to_domain_task(task_row)

    async def find_all(self, limit: int = 50, offset: int = 0) -> list[Task]:
        statement = (
            select(TaskRow)
            .order_by(TaskRow.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self._session("find_all") as session:
            result = await session.execute(statement)
            rows = result.scalars().all()
        return [OrmMapper.to_domain_task(row) for row in rows]

    async def update(self, task_id: UUID, patch: Mapping[str, Any]) -> Task | None:
        """
        Apply only the fields present in ``patch`` and refresh ``updated_at``.

        An empty patch is a no-op read. ``updated_at`` always moves forward,
        even when the clock has not ticked since the previous write.
        """
        unknown = set(patch) - _PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be patched: {sorted(unknown)}")
        if not patch:
            return await self.find_by_id(task_id)

        async with self._session("update") as session:
            async with session.begin():
                task_row = await session.get(TaskRow, task_id)
                if task_row is None:
                    return None
                for field, value in patch.items():
                    setattr(task_row, field, value)
                task_row.updated_at = _after(task_row.updated_at)
        return OrmMapper.to_domain_task(task_row)

    async def delete(self, task_id: UUID) -> bool:
        async with self._session("delete") as session:
            async with session.begin():
                result = await session.execute(delete(TaskRow).where(TaskRow.id == task_id))
        return result.rowcount > 0

    async def ping(self) -> None:
        async with self._session("ping") as session:
            await session.execute(text("SELECT 1"))
