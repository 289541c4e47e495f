from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.app.domain.models.task_priority import TaskPriority
from src.app.domain.models.task_status import TaskStatus

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class TaskPayload(BaseModel):
    """Base class for task request bodies: camelCase on the wire, unknown keys dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def _due_date_is_text(cls, value: Any) -> Any:
        # Only ISO-8601 strings count as date-times; bare numbers would be read as epochs.
        if value is None or isinstance(value, (str, datetime)):
            return value
        raise ValueError("dueDate must be a date-time string")

    @field_validator("due_date", mode="after", check_fields=False)
    @classmethod
    def _due_date_as_utc(cls, value: datetime | None) -> datetime | None:
        # Stored as UTC; backends without timezone columns drop the offset.
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TaskCreate(TaskPayload):
    title: str = Field(
        min_length=1, max_length=TITLE_MAX_LENGTH, description="Short summary of the work."
    )
    description: str | None = Field(
        default=None, max_length=DESCRIPTION_MAX_LENGTH, description="Longer details."
    )
    priority: TaskPriority = Field(description="Relative urgency of the task.")
    assigned_to: str | None = Field(default=None, description="Free-text assignee.")
    due_date: datetime | None = Field(default=None, description="Optional deadline.")


class TaskUpdate(TaskPayload):
    """
    Partial update. Only fields the client actually sent are applied; use
    ``to_patch`` rather than reading attributes, since an absent field and a
    field explicitly cleared with ``null`` look the same as attributes.
    """

    title: str | None = Field(
        default=None, min_length=1, max_length=TITLE_MAX_LENGTH, description="New title."
    )
    description: str | None = Field(
        default=None, max_length=DESCRIPTION_MAX_LENGTH, description="New description."
    )
    status: TaskStatus | None = Field(default=None, description="New board column.")
    priority: TaskPriority | None = Field(default=None, description="New priority.")
    assigned_to: str | None = Field(default=None, description="New assignee.")
    due_date: datetime | None = Field(default=None, description="New deadline.")

    @model_validator(mode="after")
    def _required_columns_not_cleared(self) -> TaskUpdate:
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_patch(self) -> dict[str, Any]:
        """Return ``{field_name: new_value}`` for the fields present in the request."""
        return self.model_dump(exclude_unset=True)
