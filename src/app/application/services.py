from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, TypeVar
from uuid import UUID

from pydantic import ValidationError

from src.app.domain.exceptions import (
    InvalidTaskIdError,
    TaskNotFoundError,
    TaskValidationError,
)
from src.app.domain.models import (
    Pagination,
    Task,
    TaskCreate,
    TaskPage,
    TaskPayload,
    TaskUpdate,
)
from src.app.domain.repositories import TaskRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
MAX_LIMIT = 100

_UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)

PayloadT = TypeVar("PayloadT", bound=TaskPayload)


class TaskService:
    """Validates task requests and delegates them to the task repository."""

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    async def create_task(self, payload: Mapping[str, Any] | TaskCreate) -> Task:
        """Create a task in the ``todo`` column from a client payload."""
        data = self._validate(TaskCreate, payload)
        task = await self._repository.create(data)
        logger.info("Task created", extra={"task_id": str(task.id)})
        return task

    async def get_task(self, task_id: str) -> Task:
        task = await self._repository.find_by_id(self.parse_task_id(task_id))
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list_tasks(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> TaskPage:
        """
        Return one page of tasks, most recent first.

        Out-of-range values fall back to the defaults instead of failing:
        ``page`` below 1 becomes 1 and ``limit`` outside [1, 100] becomes 50.
        ``pagination.total`` is the size of the returned page, not a row count.
        """
        if page < 1:
            page = DEFAULT_PAGE
        if limit < 1 or limit > MAX_LIMIT:
            limit = DEFAULT_LIMIT

        offset = (page - 1) * limit
        tasks = await self._repository.find_all(limit=limit, offset=offset)
        return TaskPage(
            tasks=tasks,
            pagination=Pagination(page=page, limit=limit, total=len(tasks)),
        )

    async def update_task(self, task_id: str, payload: Mapping[str, Any] | TaskUpdate) -> Task:
        """
        Apply a partial update. Fields missing from ``payload`` are left as they
        are; a payload with no recognised fields returns the task unchanged.
        """
        uuid = self.parse_task_id(task_id)
        patch = self._validate(TaskUpdate, payload).to_patch()
        task = await self._repository.update(uuid, patch)
        if task is None:
            raise TaskNotFoundError(task_id)
        logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(patch)})
        return task

    async def delete_task(self, task_id: str) -> None:
        deleted = await self._repository.delete(self.parse_task_id(task_id))
        if not deleted:
            raise TaskNotFoundError(task_id)
        logger.info("Task deleted", extra={"task_id": task_id})

    @staticmethod
    def parse_task_id(task_id: str) -> UUID:
        """Return ``task_id`` as a UUID, or raise ``InvalidTaskIdError`` before any lookup."""
        if not isinstance(task_id, str) or not _UUID_PATTERN.fullmatch(task_id):
            raise InvalidTaskIdError(str(task_id))
        return UUID(task_id)

    @staticmethod
    def _validate(model: type[PayloadT], payload: Mapping[str, Any] | PayloadT) -> PayloadT:
        if isinstance(payload, model):
            return payload
        if not isinstance(payload, Mapping):
            raise TaskValidationError("Task payload must be a JSON object.")
        try:
            return model.model_validate(dict(payload))
        except ValidationError as exc:
            raise TaskValidationError(
                "Invalid task data.", errors=exc.errors(include_url=False)
            ) from exc
