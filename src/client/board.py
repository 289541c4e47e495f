from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from src.app.domain.models import Task, TaskPriority, TaskStatus
from src.client.api import ApiError, TaskApiClient
from src.client.cache import QueryCache

logger = logging.getLogger(__name__)

TASKS_QUERY_KEY = ("tasks",)

T = TypeVar("T")


@dataclass(frozen=True)
class BoardColumn:
    status: TaskStatus
    title: str
    tasks: list[Task] = field(default_factory=list)


COLUMN_TITLES: tuple[tuple[TaskStatus, str], ...] = (
    (TaskStatus.TODO, "To Do"),
    (TaskStatus.IN_PROGRESS, "In Progress"),
    (TaskStatus.REVIEW, "Review"),
    (TaskStatus.DONE, "Done"),
)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class TaskBoard:
    """
    Client-side kanban board over the task API.

    The task list lives in a ``QueryCache`` under ``TASKS_QUERY_KEY``. Every
    successful mutation invalidates that key and refetches the whole list; the
    cache is never patched locally. Drag feedback is only the ``active_task``
    overlay, the card moves once the refetch lands.
    """

    def __init__(self, api: TaskApiClient, cache: QueryCache | None = None) -> None:
        self._api = api
        self._cache = cache or QueryCache()
        self._active_task: Task | None = None
        self._hover_column: TaskStatus | None = None
        self.notifications: list[Notification] = []

    @property
    def tasks(self) -> list[Task]:
        page = self._cache.get(TASKS_QUERY_KEY)
        return list(page.tasks) if page is not None else []

    @property
    def active_task(self) -> Task | None:
        return self._active_task

    @property
    def hover_column(self) -> TaskStatus | None:
        return self._hover_column

    @property
    def last_notification(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    async def load(self) -> list[Task]:
        await self._cache.fetch(TASKS_QUERY_KEY, self._api.get_tasks)
        return self.tasks

    async def create_task(self, payload: Mapping[str, Any]) -> Task | None:
        return await self._mutate(
            lambda: self._api.create_task(payload),
            success="Task created successfully!",
            failure="Failed to create task",
        )

    async def update_task(self, task_id: str, payload: Mapping[str, Any]) -> Task | None:
        return await self._mutate(
            lambda: self._api.update_task(task_id, payload),
            success="Task updated successfully!",
            failure="Failed to update task",
        )

    async def delete_task(self, task_id: str) -> bool:
        async def _delete() -> bool:
            await self._api.delete_task(task_id)
            return True

        deleted = await self._mutate(
            _delete,
            success="Task deleted successfully!",
            failure="Failed to delete task",
        )
        return bool(deleted)

    def visible_tasks(
        self,
        search: str = "",
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> list[Task]:
        needle = search.lower()
        visible = []
        for task in self.tasks:
            matches_search = needle in task.title.lower() or (
                task.description is not None and needle in task.description.lower()
            )
            if not matches_search:
                continue
            if status is not None and task.status != status:
                continue
            if priority is not None and task.priority != priority:
                continue
            visible.append(task)
        return visible

    def columns(
        self,
        search: str = "",
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
    ) -> list[BoardColumn]:
        visible = self.visible_tasks(search, status, priority)
        return [
            BoardColumn(
                status=column_status,
                title=title,
                tasks=[task for task in visible if task.status == column_status],
            )
            for column_status, title in COLUMN_TITLES
        ]

    def drag_start(self, task_id: str) -> Task | None:
        self._active_task = self._find(task_id)
        self._hover_column = None
        return self._active_task

    def drag_over(self, target: str | None) -> TaskStatus | None:
        """Track the column under the pointer. Never talks to the API."""
        self._hover_column = self._resolve_column(target) if target is not None else None
        return self._hover_column

    async def drag_end(self, target: str | None) -> bool:
        """
        Drop the active card on ``target`` (a column status or a card id).

        Issues exactly one status update when the card lands in a different
        column; returns whether an update was sent.
        """
        task = self._active_task
        self._active_task = None
        self._hover_column = None
        if task is None or target is None:
            return False

        column = self._resolve_column(target)
        if column is None or column == task.status:
            return False

        logger.debug(
            "Moving task between columns",
            extra={"task_id": str(task.id), "from": task.status.value, "to": column.value},
        )
        await self.update_task(str(task.id), {"status": column.value})
        return True

    async def _mutate(
        self,
        call: Callable[[], Awaitable[T]],
        *,
        success: str,
        failure: str,
    ) -> T | None:
        try:
            result = await call()
        except ApiError as exc:
            self._notify("error", exc.detail or failure)
            return None
        self._notify("success", success)
        try:
            await self._cache.invalidate(TASKS_QUERY_KEY)
        except ApiError as exc:
            logger.warning("Failed to refresh tasks after mutation", extra={"error": exc.message})
            self._notify("error", "Failed to load tasks")
        return result

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def _find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if str(task.id) == task_id:
                return task
        return None

    def _resolve_column(self, target: str) -> TaskStatus | None:
        try:
            return TaskStatus(target)
        except ValueError:
            pass
        task = self._find(target)
        return task.status if task is not None else None
