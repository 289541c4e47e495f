from datetime import UTC, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.app.domain.exceptions import StorageError
from src.app.domain.models import TaskCreate, TaskPriority, TaskStatus
from src.app.infrastructure.postgres import repositories
from src.app.infrastructure.postgres.orm import PostgresOrm
from src.app.infrastructure.postgres.repositories import PostgresTaskRepository


def _payload(title: str, **extra) -> TaskCreate:
    return TaskCreate.model_validate({"title": title, "priority": "medium", **extra})


@pytest.mark.asyncio
async def test_create_stamps_defaults(repository: PostgresTaskRepository) -> None:
    first = await repository.create(_payload("First"))
    second = await repository.create(_payload("Second"))

    assert first.status is TaskStatus.TODO
    assert first.created_at == first.updated_at
    assert first.id != second.id

    stored = await repository.find_by_id(first.id)
    assert stored == first


@pytest.mark.asyncio
async def test_find_all_is_newest_first_and_windowed(repository: PostgresTaskRepository) -> None:
    a = await repository.create(_payload("A"))
    b = await repository.create(_payload("B"))
    c = await repository.create(_payload("C"))

    first_page = await repository.find_all(limit=2, offset=0)
    second_page = await repository.find_all(limit=2, offset=2)

    assert [task.id for task in first_page] == [c.id, b.id]
    assert [task.id for task in second_page] == [a.id]


@pytest.mark.asyncio
async def test_update_touches_only_patched_fields(repository: PostgresTaskRepository) -> None:
    created = await repository.create(
        _payload("Write docs", description="draft", assignedTo="ana")
    )

    updated = await repository.update(created.id, {"status": TaskStatus.REVIEW})

    assert updated is not None
    assert updated.status is TaskStatus.REVIEW
    assert updated.title == "Write docs"
    assert updated.description == "draft"
    assert updated.assigned_to == "ana"
    assert updated.priority is TaskPriority.MEDIUM
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_update_can_clear_optional_fields(repository: PostgresTaskRepository) -> None:
    created = await repository.create(_payload("Write docs", assignedTo="ana"))

    updated = await repository.update(created.id, {"assigned_to": None})

    assert updated is not None
    assert updated.assigned_to is None


@pytest.mark.asyncio
async def test_empty_patch_returns_task_unchanged(repository: PostgresTaskRepository) -> None:
    created = await repository.create(_payload("Write docs"))

    unchanged = await repository.update(created.id, {})

    assert unchanged == created


@pytest.mark.asyncio
async def test_update_missing_task_returns_none(repository: PostgresTaskRepository) -> None:
    assert await repository.update(uuid4(), {"title": "x"}) is None
    assert await repository.find_by_id(uuid4()) is None


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields(repository: PostgresTaskRepository) -> None:
    created = await repository.create(_payload("Write docs"))

    with pytest.raises(ValueError):
        await repository.update(created.id, {"created_at": None})


@pytest.mark.asyncio
async def test_delete_reports_whether_a_row_was_removed(
    repository: PostgresTaskRepository,
) -> None:
    created = await repository.create(_payload("Write docs"))

    assert await repository.delete(created.id) is True
    assert await repository.delete(created.id) is False
    assert await repository.find_by_id(created.id) is None


@pytest.mark.asyncio
async def test_database_failures_surface_as_storage_error(tmp_path) -> None:
    # No schema created: every statement fails inside the driver.
    orm = PostgresOrm(f"sqlite+aiosqlite:///{tmp_path / 'empty.sqlite3'}")
    repository = PostgresTaskRepository(orm)
    try:
        with pytest.raises(StorageError) as excinfo:
            await repository.find_all()
        assert excinfo.value.operation == "find_all"

        with pytest.raises(StorageError):
            await repository.create(_payload("Write docs"))

        await repository.ping()
    finally:
        await orm.dispose()


@pytest.mark.asyncio
async def test_due_date_with_offset_is_stored_as_utc(repository: PostgresTaskRepository) -> None:
    created = await repository.create(_payload("Write docs", dueDate="2026-11-01T09:30:00+02:00"))

    stored = await repository.find_by_id(created.id)

    expected = datetime(2026, 11, 1, 7, 30, tzinfo=timezone.utc)
    assert created.due_date == expected
    assert stored is not None
    assert stored.due_date == expected
    assert stored.due_date.utcoffset() == timedelta(0)


class _StoppedClock(datetime):
    @classmethod
    def now(cls, tz=None):
        return datetime(2026, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_creates_within_one_clock_tick_keep_insertion_order(
    repository: PostgresTaskRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(repositories, "datetime", _StoppedClock)

    a = await repository.create(_payload("A"))
    b = await repository.create(_payload("B"))
    c = await repository.create(_payload("C"))

    assert a.created_at < b.created_at < c.created_at
    assert [task.id for task in await repository.find_all(limit=2)] == [c.id, b.id]
