from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from src.app.domain.models.payloads import TaskCreate
from src.app.domain.models.task import Task
from src.app.domain.models.task_status import TaskStatus
from src.app.infrastructure.postgres.orm import TaskRow


class OrmMapper:
    @staticmethod
    def to_task_row(task_id: UUID, payload: TaskCreate, now: datetime) -> TaskRow:
        return TaskRow(
            id=task_id,
            title=payload.title,
            description=payload.description,
            status=TaskStatus.TODO,
            priority=payload.priority,
            assigned_to=payload.assigned_to,
            created_at=now,
            updated_at=now,
            due_date=payload.due_date,
        )

    @staticmethod
    def to_domain_task(row: TaskRow) -> Task:
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            status=row.status,
            priority=row.priority,
            assigned_to=row.assigned_to,
            created_at=OrmMapper.as_utc(row.created_at),
            updated_at=OrmMapper.as_utc(row.updated_at),
            due_date=OrmMapper.as_utc(row.due_date),
        )

    @staticmethod
    def as_utc(value: datetime | None) -> datetime | None:
        # Backends without timezone support (SQLite) hand back naive UTC values.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
