"""
Task endpoints.

These routes provide CRUD operations for tasks.  Every handler wraps
its service call in its own failure boundary:

* a missing task (the service returned ``None`` or ``False``) becomes a
  404 ``"Task not found"``;
* any exception raised by the service (malformed identifier, database
  unavailable, ...) is logged with its traceback and becomes a 500 with
  a fixed, operation specific message.  The underlying error is never
  exposed to the client.

Request bodies are validated by the ``TaskCreate``/``TaskUpdate``
schemas before any handler runs; invalid payloads get FastAPI's 422
response.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...core.errors import ApiError
from ...middleware.request_logging import redact
from ...schemas.task import TaskCreate, TaskDeleted, TaskFilters, TaskList, TaskRead, TaskUpdate
from ...services.task_service import TaskService
from ..dependencies import get_task_service


logger = logging.getLogger(__name__)

router = APIRouter()


NOT_FOUND_RESPONSE = {404: {"description": "Task not found"}}
FAILURE_RESPONSE = {500: {"description": "Internal server error"}}


@router.post(
    "",
    response_model=TaskRead,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses=FAILURE_RESPONSE,
)
async def create_task(
    data: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Create a task.

    New tasks start with ``completed = false``; the identifier and both
    timestamps are assigned on insert.
    """
    try:
        return await service.create_task(data)
    except Exception as e:
        logger.exception("Failed to create task (payload=%s)", redact(data.model_dump()))
        raise ApiError.internal("Failed to create task") from e


@router.get(
    "",
    response_model=TaskList,
    response_model_exclude_none=True,
    summary="Get all tasks with optional filtering",
    responses=FAILURE_RESPONSE,
)
async def list_tasks(
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number of tasks to return"),
    offset: Optional[int] = Query(None, ge=0, description="Number of tasks to skip"),
    service: TaskService = Depends(get_task_service),
) -> TaskList:
    """Return a page of tasks, newest first, with the total match count.

    - **completed** — exact match on the completion flag; omitted means
      no filter (not ``false``).
    - **search** — case-insensitive substring of title or description.
    - **limit**, **offset** — pagination; defaults are 100 and 0.
    """
    filters = TaskFilters(completed=completed, search=search or None)
    try:
        tasks = await service.get_all_tasks(filters, limit, offset)
        total = await service.get_tasks_count(filters)
    except Exception as e:
        logger.exception(
            "Failed to fetch tasks (completed=%s, search=%r, limit=%s, offset=%s)",
            completed,
            search,
            limit,
            offset,
        )
        raise ApiError.internal("Failed to fetch tasks") from e
    return TaskList(tasks=tasks, total=total)


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    response_model_exclude_none=True,
    summary="Get a task by ID",
    responses={**NOT_FOUND_RESPONSE, **FAILURE_RESPONSE},
)
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    try:
        task = await service.get_task_by_id(task_id)
    except Exception as e:
        logger.exception("Failed to fetch task %s", task_id)
        raise ApiError.internal("Failed to fetch task") from e
    if task is None:
        raise ApiError.not_found()
    return task


@router.put(
    "/{task_id}",
    response_model=TaskRead,
    response_model_exclude_none=True,
    summary="Update a task by ID",
    responses={**NOT_FOUND_RESPONSE, **FAILURE_RESPONSE},
)
async def update_task(
    task_id: str,
    updates: TaskUpdate,
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Update an existing task.

    Partial updates are supported; fields missing from the body remain
    unchanged.  ``updatedAt`` is refreshed on every successful call.
    """
    changes = updates.changes()
    try:
        task = await service.update_task(task_id, changes)
    except Exception as e:
        logger.exception("Failed to update task %s (changes=%s)", task_id, redact(changes))
        raise ApiError.internal("Failed to update task") from e
    if task is None:
        raise ApiError.not_found()
    return task


@router.delete(
    "/{task_id}",
    response_model=TaskDeleted,
    summary="Delete a task by ID",
    responses={**NOT_FOUND_RESPONSE, **FAILURE_RESPONSE},
)
async def delete_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskDeleted:
    """Delete a task permanently."""
    try:
        deleted = await service.delete_task(task_id)
    except Exception as e:
        logger.exception("Failed to delete task %s", task_id)
        raise ApiError.internal("Failed to delete task") from e
    if not deleted:
        raise ApiError.not_found()
    return TaskDeleted()
