"""Tests for the MongoDB task repository."""

from datetime import timedelta

import pytest
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient

from progress_tracker_api.app.repositories.mongo_task_repository import MongoTaskRepository
from progress_tracker_api.app.schemas.task import TaskCreate, TaskFilters


def _seed(repository: MongoTaskRepository):
    """Create the three tasks used by the listing tests (oldest first)."""
    first = repository.create(TaskCreate(title="Task 1", description="Description 1"))
    second = repository.create(TaskCreate(title="Task 2", description="Description 2"))
    repository.update(second.id, {"completed": True})
    third = repository.create(TaskCreate(title="Search Task", description="Special description"))
    return first, second, third


def test_create_with_title_only(repository: MongoTaskRepository) -> None:
    task = repository.create(TaskCreate(title="Title Only Task"))

    assert task.title == "Title Only Task"
    assert task.completed is False
    assert task.description is None
    assert task.created_at == task.updated_at
    assert ObjectId.is_valid(task.id)


def test_create_does_not_store_missing_description(repository: MongoTaskRepository, collection) -> None:
    task = repository.create(TaskCreate(title="No description"))

    document = collection.find_one({"_id": ObjectId(task.id)})
    assert "description" not in document
    assert document["completed"] is False


def test_find_by_id_returns_created_task(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Test Task", description="Test Description"))

    assert repository.find_by_id(created.id) == created


def test_find_by_id_missing_returns_none(repository: MongoTaskRepository) -> None:
    assert repository.find_by_id(str(ObjectId())) is None


def test_find_by_id_malformed_id_raises(repository: MongoTaskRepository) -> None:
    with pytest.raises(InvalidId):
        repository.find_by_id("invalid-id")


def test_update_changes_only_supplied_fields(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Original Task", description="Original Description"))

    updated = repository.update(created.id, {"completed": True})

    assert updated is not None
    assert updated.id == created.id
    assert updated.title == "Original Task"
    assert updated.description == "Original Description"
    assert updated.completed is True
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at


def test_update_always_advances_updated_at(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Touch me"))

    first = repository.update(created.id, {})
    second = repository.update(created.id, {"title": "Touched"})

    assert created.updated_at < first.updated_at < second.updated_at
    assert second.updated_at - created.updated_at >= timedelta(milliseconds=2)
    assert repository.find_by_id(created.id) == second


def test_update_with_null_description_clears_it(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Task", description="to be removed"))

    updated = repository.update(created.id, {"description": None})

    assert updated.description is None
    assert repository.find_by_id(created.id).description is None


def test_update_rejects_null_title(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Task"))

    with pytest.raises(ValueError):
        repository.update(created.id, {"title": None})


def test_update_rejects_unknown_fields(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Task"))

    with pytest.raises(ValueError):
        repository.update(created.id, {"createdAt": "2020-01-01"})


def test_update_missing_returns_none(repository: MongoTaskRepository) -> None:
    assert repository.update(str(ObjectId()), {"title": "Updated"}) is None


def test_delete_twice(repository: MongoTaskRepository) -> None:
    created = repository.create(TaskCreate(title="Task to Delete"))

    assert repository.delete(created.id) is True
    assert repository.delete(created.id) is False
    assert repository.find_by_id(created.id) is None


def test_delete_malformed_id_raises(repository: MongoTaskRepository) -> None:
    with pytest.raises(InvalidId):
        repository.delete("not-an-object-id")


def test_find_all_newest_first(repository: MongoTaskRepository) -> None:
    first, second, third = _seed(repository)

    tasks = repository.find_all()

    assert [t.id for t in tasks] == [third.id, second.id, first.id]


def test_find_all_filters_by_completed(repository: MongoTaskRepository) -> None:
    _seed(repository)

    completed = repository.find_all(TaskFilters(completed=True))
    pending = repository.find_all(TaskFilters(completed=False))

    assert [t.title for t in completed] == ["Task 2"]
    assert all(t.completed is False for t in pending)
    assert len(pending) == 2
    assert repository.count(TaskFilters(completed=True)) == 1
    assert repository.count(TaskFilters(completed=False)) == 2


def test_search_matches_title_or_description_case_insensitively(repository: MongoTaskRepository) -> None:
    _seed(repository)
    repository.create(TaskCreate(title="Unrelated", description="needs more SEARCHING"))

    titles = {t.title for t in repository.find_all(TaskFilters(search="search"))}

    assert titles == {"Search Task", "Unrelated"}
    assert repository.count(TaskFilters(search="search")) == 2
    assert [t.title for t in repository.find_all(TaskFilters(search="Special"))] == ["Search Task"]


def test_search_is_a_literal_substring(repository: MongoTaskRepository) -> None:
    repository.create(TaskCreate(title="version 1.2"))
    repository.create(TaskCreate(title="version 1x2"))

    assert [t.title for t in repository.find_all(TaskFilters(search="1.2"))] == ["version 1.2"]
    assert repository.find_all(TaskFilters(search="(")) == []


def test_search_combined_with_completed(repository: MongoTaskRepository) -> None:
    _seed(repository)

    assert repository.count(TaskFilters(completed=True, search="task")) == 1
    assert repository.count(TaskFilters(completed=False, search="special")) == 1


def test_pagination(repository: MongoTaskRepository) -> None:
    first, second, third = _seed(repository)

    page = repository.find_all(limit=2, offset=1)

    assert [t.id for t in page] == [second.id, first.id]
    assert repository.count() == 3


def test_default_limit_is_100(repository: MongoTaskRepository) -> None:
    for i in range(105):
        repository.create(TaskCreate(title=f"Task {i}"))

    assert len(repository.find_all()) == 100
    assert len(repository.find_all(offset=100)) == 5
    assert repository.count() == 105


def test_ping_reachable_store(repository: MongoTaskRepository) -> None:
    assert repository.ping() is True


def test_ping_unreachable_store() -> None:
    client = MongoClient("mongodb://127.0.0.1:1", connect=False, serverSelectionTimeoutMS=100)
    try:
        assert MongoTaskRepository(client.progress_test.tasks).ping() is False
    finally:
        client.close()
