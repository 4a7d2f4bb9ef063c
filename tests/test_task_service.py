"""Tests for TaskService delegation."""

import asyncio
from unittest.mock import MagicMock

import pytest

from progress_tracker_api.app.repositories.task_repository import TaskRepository
from progress_tracker_api.app.schemas.task import TaskCreate, TaskFilters
from progress_tracker_api.app.services.task_service import TaskService


@pytest.fixture
def repository() -> MagicMock:
    return MagicMock(spec=TaskRepository)


@pytest.fixture
def service(repository: MagicMock) -> TaskService:
    return TaskService(repository)


def test_create_task_delegates(service: TaskService, repository: MagicMock) -> None:
    data = TaskCreate(title="Write docs")

    result = asyncio.run(service.create_task(data))

    repository.create.assert_called_once_with(data)
    assert result is repository.create.return_value


def test_get_all_tasks_passes_filters_and_pagination(service: TaskService, repository: MagicMock) -> None:
    filters = TaskFilters(completed=True, search="docs")

    asyncio.run(service.get_all_tasks(filters, 10, 5))

    repository.find_all.assert_called_once_with(filters, 10, 5)


def test_sentinels_are_returned_unchanged(service: TaskService, repository: MagicMock) -> None:
    repository.find_by_id.return_value = None
    repository.update.return_value = None
    repository.delete.return_value = False

    assert asyncio.run(service.get_task_by_id("abc")) is None
    assert asyncio.run(service.update_task("abc", {"title": "x"})) is None
    assert asyncio.run(service.delete_task("abc")) is False
    repository.update.assert_called_once_with("abc", {"title": "x"})


def test_errors_propagate(service: TaskService, repository: MagicMock) -> None:
    repository.count.side_effect = RuntimeError("database down")

    with pytest.raises(RuntimeError, match="database down"):
        asyncio.run(service.get_tasks_count(TaskFilters()))
