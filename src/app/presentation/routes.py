from __future__ import annotations

import logging
from typing import Any

import inject
from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.app.application.services import DEFAULT_LIMIT, DEFAULT_PAGE, TaskService
from src.app.domain.exceptions import InvalidTaskIdError, TaskNotFoundError
from src.app.domain.models import Task, TaskPage

router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)

INVALID_TASK_DATA = "Invalid task data"
INVALID_TASK_ID = "Invalid task ID"
TASK_NOT_FOUND = "Task not found"
INTERNAL_ERROR = "Internal server error"


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable error message.")


def get_task_service() -> TaskService:
    return inject.instance(TaskService)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "",
    response_model=Task,
    status_code=201,
    summary="Create a task",
    description="Creates a task in the `todo` column. `title` and `priority` are required.",
    responses={400: {"model": ErrorResponse, "description": "Invalid task data."}},
)
async def create_task(
    payload: dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.create_task(payload)
    except Exception:
        logger.exception("Failed to create task")
        return error_response(400, INVALID_TASK_DATA)


@router.get(
    "",
    response_model=TaskPage,
    summary="List tasks",
    description=(
        "Returns one page of tasks, most recently created first. Out-of-range "
        "`page`/`limit` values fall back to 1 and 50."
    ),
    responses={500: {"model": ErrorResponse, "description": "Internal server error."}},
)
async def list_tasks(
    page: int = Query(DEFAULT_PAGE, description="1-based page number"),
    limit: int = Query(DEFAULT_LIMIT, description="Page size, 1..100"),
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.list_tasks(page, limit)
    except Exception:
        logger.exception("Failed to list tasks", extra={"page": page, "limit": limit})
        return error_response(500, INTERNAL_ERROR)


@router.get(
    "/{task_id}",
    response_model=Task,
    summary="Get a task",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed task id."},
        404: {"model": ErrorResponse, "description": "Task not found."},
        500: {"model": ErrorResponse, "description": "Internal server error."},
    },
)
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        return await service.get_task(task_id)
    except TaskNotFoundError:
        logger.info("Task not found", extra={"task_id": task_id})
        return error_response(404, TASK_NOT_FOUND)
    except InvalidTaskIdError:
        logger.warning("Rejected malformed task id", extra={"task_id": task_id})
        return error_response(400, INVALID_TASK_ID)
    except Exception:
        logger.exception("Failed to fetch task", extra={"task_id": task_id})
        return error_response(500, INTERNAL_ERROR)


@router.put(
    "/{task_id}",
    response_model=Task,
    summary="Update a task",
    description="Partial update: only the fields present in the body are changed.",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed id or invalid task data."},
        404: {"model": ErrorResponse, "description": "Task not found."},
    },
)
async def update_task(
    task_id: str,
    payload: dict[str, Any] = Body(...),
    service: TaskService = Depends(get_task_service),
):
    try:
        return await service.update_task(task_id, payload)
    except TaskNotFoundError:
        logger.info("Task not found", extra={"task_id": task_id})
        return error_response(404, TASK_NOT_FOUND)
    except InvalidTaskIdError:
        logger.warning("Rejected malformed task id", extra={"task_id": task_id})
        return error_response(400, INVALID_TASK_ID)
    except Exception:
        logger.exception("Failed to update task", extra={"task_id": task_id})
        return error_response(400, INVALID_TASK_DATA)


@router.delete(
    "/{task_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a task",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed task id."},
        404: {"model": ErrorResponse, "description": "Task not found."},
        500: {"model": ErrorResponse, "description": "Internal server error."},
    },
)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        await service.delete_task(task_id)
    except TaskNotFoundError:
        logger.info("Task not found", extra={"task_id": task_id})
        return error_response(404, TASK_NOT_FOUND)
    except InvalidTaskIdError:
        logger.warning("Rejected malformed task id", extra={"task_id": task_id})
        return error_response(400, INVALID_TASK_ID)
    except Exception:
        logger.exception("Failed to delete task", extra={"task_id": task_id})
        return error_response(500, INTERNAL_ERROR)
    return Response(status_code=204)
