"""
Storage contract for tasks.

Routes and services depend on ``TaskRepository`` rather than on a
concrete driver so the storage backend can be swapped (or replaced by
an in-memory collection in tests) without touching API handlers.

"Not found" is reported through return values: ``None`` from
``find_by_id``/``update`` and ``False`` from ``delete``.  Any exception
raised by an implementation means the operation itself failed.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..schemas.task import TaskCreate, TaskFilters, TaskRead


DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0


class TaskRepository(ABC):
    """Persistence operations for tasks."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskRead:
        """Persist a new, not yet completed task and return it."""

    @abstractmethod
    def find_all(
        self,
        filters: Optional[TaskFilters] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TaskRead]:
        """Return matching tasks, newest first, sliced by ``offset``/``limit``."""

    @abstractmethod
    def find_by_id(self, task_id: str) -> Optional[TaskRead]:
        """Return the task or ``None`` if no task has this id."""

    @abstractmethod
    def update(self, task_id: str, changes: dict) -> Optional[TaskRead]:
        """Apply ``changes`` and refresh ``updatedAt``; ``None`` if absent."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Remove the task; ``False`` if there was nothing to remove."""

    @abstractmethod
    def count(self, filters: Optional[TaskFilters] = None) -> int:
        """Count tasks matching ``filters``."""

    @abstractmethod
    def ping(self) -> bool:
        """Return whether the underlying store is reachable."""
