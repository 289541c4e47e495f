from typing import Any


class TaskNotFoundError(Exception):
    """Raised when a task identifier does not exist in the task store."""
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id '{task_id}' was not found.")
        self.task_id = task_id


class InvalidTaskIdError(Exception):
    """Raised when a task identifier is not a canonical UUID string."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task id '{task_id}' is not a valid UUID.")
        self.task_id = task_id


class TaskValidationError(Exception):
    """Raised when a create or update payload breaks the task field rules."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class StorageError(Exception):
    """Raised when the task store cannot complete an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Task storage failed during '{operation}'.")
        self.operation = operation
