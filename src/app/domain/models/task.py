from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.app.domain.models.task_priority import TaskPriority
from src.app.domain.models.task_status import TaskStatus


class Task(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(description="Unique task identifier.")
    title: str = Field(description="Short summary of the work.")
    description: str | None = Field(default=None, description="Longer free-form details.")
    status: TaskStatus = Field(description="Board column the task currently sits in.")
    priority: TaskPriority = Field(description="Relative urgency of the task.")
    assigned_to: str | None = Field(default=None, description="Free-text assignee identifier.")
    created_at: datetime = Field(description="When the task was created.")
    updated_at: datetime = Field(description="When the task was last modified.")
    due_date: datetime | None = Field(default=None, description="Optional deadline.")
