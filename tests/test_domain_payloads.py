from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.app.domain.models import Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate


def test_create_accepts_camel_case_fields() -> None:
    payload = TaskCreate.model_validate(
        {
            "title": "Write docs",
            "priority": "high",
            "assignedTo": "ana",
            "dueDate": "2026-11-01T09:30:00Z",
        }
    )

    assert payload.priority is TaskPriority.HIGH
    assert payload.assigned_to == "ana"
    assert payload.due_date == datetime(2026, 11, 1, 9, 30, tzinfo=UTC)


@pytest.mark.parametrize(
    "body",
    [
        {"priority": "high"},
        {"title": "", "priority": "high"},
        {"title": "x" * 201, "priority": "high"},
        {"title": "Write docs"},
        {"title": "Write docs", "priority": "critical"},
        {"title": "Write docs", "priority": "high", "description": "d" * 1001},
        {"title": "Write docs", "priority": "high", "dueDate": "next tuesday"},
        {"title": "Write docs", "priority": "high", "dueDate": 1767225600},
    ],
)
def test_create_rejects_invalid_payloads(body: dict) -> None:
    with pytest.raises(ValidationError):
        TaskCreate.model_validate(body)


def test_create_accepts_boundary_lengths() -> None:
    payload = TaskCreate.model_validate(
        {"title": "x" * 200, "priority": "low", "description": "d" * 1000}
    )

    assert len(payload.title) == 200
    assert len(payload.description) == 1000


def test_naive_due_date_is_read_as_utc() -> None:
    payload = TaskCreate.model_validate(
        {"title": "t", "priority": "low", "dueDate": "2026-11-01T09:30:00"}
    )

    assert payload.due_date.tzinfo is not None
    assert payload.due_date.utcoffset().total_seconds() == 0


def test_due_date_offset_is_converted_to_utc() -> None:
    payload = TaskUpdate.model_validate({"dueDate": "2026-11-01T09:30:00+02:00"})

    assert payload.due_date == datetime(2026, 11, 1, 7, 30, tzinfo=UTC)
    assert payload.due_date.utcoffset().total_seconds() == 0


def test_update_patch_only_contains_sent_fields() -> None:
    update = TaskUpdate.model_validate({"status": "done", "assignedTo": None})

    assert update.to_patch() == {"status": TaskStatus.DONE, "assigned_to": None}


def test_update_ignores_unknown_fields() -> None:
    update = TaskUpdate.model_validate({"id": "nope", "color": "red"})

    assert update.to_patch() == {}


@pytest.mark.parametrize("field", ["title", "status", "priority"])
def test_update_rejects_clearing_required_fields(field: str) -> None:
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate({field: None})


@pytest.mark.parametrize(
    "body",
    [
        {"title": ""},
        {"status": "archived"},
        {"priority": "URGENT"},
        {"description": "d" * 1001},
    ],
)
def test_update_applies_the_same_field_rules(body: dict) -> None:
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate(body)


def test_task_serializes_with_camel_case_and_lowercase_tokens() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    task = Task(
        id="0b5c1a36-4f0e-4c7a-9d51-1f6f3f4f9a10",
        title="Write docs",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.URGENT,
        created_at=now,
        updated_at=now,
    )

    body = task.model_dump(mode="json", by_alias=True)

    assert body["status"] == "in_progress"
    assert body["priority"] == "urgent"
    assert {"assignedTo", "createdAt", "updatedAt", "dueDate"} <= body.keys()
