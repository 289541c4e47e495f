from pydantic import BaseModel, Field

from src.app.domain.models.task import Task


class Pagination(BaseModel):
    page: int = Field(description="1-based page number that was served.")
    limit: int = Field(description="Maximum number of tasks per page.")
    total: int = Field(description="Number of tasks in this page.")


class TaskPage(BaseModel):
    """One window of the task list, most recently created first."""

    tasks: list[Task] = Field(default_factory=list, description="Tasks in this page.")
    pagination: Pagination = Field(description="Window that produced ``tasks``.")
