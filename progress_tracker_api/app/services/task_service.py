"""
Service for managing tasks.

``TaskService`` is the seam between the HTTP layer and storage.  It
adds no rules of its own: every method delegates to the repository it
was built with, returning the repository's results (including the
``None``/``False`` sentinels for missing tasks) and letting its
exceptions propagate unchanged.

Repositories are synchronous (``pymongo`` blocks on every round-trip),
so each call is handed to Starlette's worker threadpool and the event
loop stays free to serve other requests while one waits on the store.
"""

from __future__ import annotations

from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from ..repositories.task_repository import TaskRepository
from ..schemas.task import TaskCreate, TaskFilters, TaskRead


class TaskService:
    """Service for creating, listing, updating and deleting tasks."""

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> TaskRepository:
        return self._repository

    async def create_task(self, data: TaskCreate) -> TaskRead:
        return await run_in_threadpool(self._repository.create, data)

    async def get_all_tasks(
        self,
        filters: Optional[TaskFilters] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TaskRead]:
        return await run_in_threadpool(self._repository.find_all, filters, limit, offset)

    async def get_task_by_id(self, task_id: str) -> Optional[TaskRead]:
        return await run_in_threadpool(self._repository.find_by_id, task_id)

    async def update_task(self, task_id: str, changes: dict) -> Optional[TaskRead]:
        return await run_in_threadpool(self._repository.update, task_id, changes)

    async def delete_task(self, task_id: str) -> bool:
        return await run_in_threadpool(self._repository.delete, task_id)

    async def get_tasks_count(self, filters: Optional[TaskFilters] = None) -> int:
        return await run_in_threadpool(self._repository.count, filters)

    async def is_healthy(self) -> bool:
        return await run_in_threadpool(self._repository.ping)
