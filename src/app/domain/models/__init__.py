from src.app.domain.models.payloads import TaskCreate, TaskPayload, TaskUpdate
from src.app.domain.models.task import Task
from src.app.domain.models.task_page import Pagination, TaskPage
from src.app.domain.models.task_priority import TaskPriority
from src.app.domain.models.task_status import TaskStatus

__all__ = [
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskPayload",
    "TaskCreate",
    "TaskUpdate",
    "TaskPage",
    "Pagination",
]
