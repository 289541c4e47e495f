from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol
from uuid import UUID

from src.app.domain.models.payloads import TaskCreate
from src.app.domain.models.task import Task


class TaskRepository(Protocol):
    """Repository contract for persisting tasks in the row store."""

    async def create(self, payload: TaskCreate) -> Task:
        """Persist a new task in the ``todo`` column and return the stored record."""

    async def find_by_id(self, task_id: UUID) -> Task | None:
        """Fetch a task, or ``None`` when ``task_id`` does not exist."""

    async def find_all(self, limit: int = 50, offset: int = 0) -> list[Task]:
        """Return one window of tasks, most recently created first."""

    async def update(self, task_id: UUID, patch: Mapping[str, Any]) -> Task | None:
        """Apply ``patch`` (present fields only) and return the updated task."""

    async def delete(self, task_id: UUID) -> bool:
        """Remove a task; ``False`` when nothing matched ``task_id``."""

    async def ping(self) -> None:
        """Round-trip to the row store, raising ``StorageError`` when unreachable."""
