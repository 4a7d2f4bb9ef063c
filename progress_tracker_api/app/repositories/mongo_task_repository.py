"""
MongoDB implementation of ``TaskRepository``.

Each task is one document in the tasks collection::

    {
        "_id": ObjectId,
        "title": str,
        "description": str,      # absent when not set
        "completed": bool,
        "createdAt": datetime,   # UTC
        "updatedAt": datetime,   # UTC
    }

Identifiers are the 24 character hex form of the document's
``ObjectId``.  A string that is not a valid ``ObjectId`` makes the
driver raise ``bson.errors.InvalidId``; that error is deliberately left
to propagate, since a malformed identifier is a failed operation and not
a missing task.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..schemas.task import TaskCreate, TaskFilters, TaskRead
from .task_repository import DEFAULT_LIMIT, DEFAULT_OFFSET, TaskRepository


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"title", "description", "completed"}
NULLABLE_FIELDS = {"description"}

# BSON datetimes carry millisecond precision.
_TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)


def _now() -> datetime:
    """Current UTC time truncated to what the store can hold."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _as_utc(value: datetime) -> datetime:
    # Clients created without ``tz_aware`` hand back naive UTC values.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MongoTaskRepository(TaskRepository):
    """Task persistence backed by a single MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create(self, data: TaskCreate) -> TaskRead:
        now = _now()
        document: Dict[str, Any] = {"title": data.title, "completed": False}
        if data.description is not None:
            document["description"] = data.description
        document["createdAt"] = now
        document["updatedAt"] = now
        result = self._collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info("Task %s created", result.inserted_id)
        return self._to_task(document)

    def update(self, task_id: str, changes: dict) -> Optional[TaskRead]:
        """Apply a partial update.

        Only keys present in ``changes`` are written; a ``description`` of
        ``None`` removes the field.  ``updatedAt`` is always refreshed and
        is kept strictly later than its previous value even when two
        writes land within the same millisecond.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        object_id = ObjectId(task_id)
        current = self._collection.find_one({"_id": object_id}, {"updatedAt": 1})
        if current is None:
            return None

        updated_at = _now()
        previous = current.get("updatedAt")
        if previous is not None and updated_at <= _as_utc(previous):
            updated_at = _as_utc(previous) + _TIMESTAMP_RESOLUTION

        to_set: Dict[str, Any] = {}
        to_unset: Dict[str, str] = {}
        for field, value in changes.items():
            if value is None:
                if field not in NULLABLE_FIELDS:
                    raise ValueError(f"Field '{field}' cannot be null")
                to_unset[field] = ""
            else:
                to_set[field] = value
        to_set["updatedAt"] = updated_at

        operation: Dict[str, Any] = {"$set": to_set}
        if to_unset:
            operation["$unset"] = to_unset
        document = self._collection.find_one_and_update(
            {"_id": object_id},
            operation,
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            # Deleted between the read and the write.
            return None
        logger.info("Task %s updated (%s)", task_id, ", ".join(sorted(changes)) or "touch")
        return self._to_task(document)

    def delete(self, task_id: str) -> bool:
        result = self._collection.delete_one({"_id": ObjectId(task_id)})
        deleted = result.deleted_count > 0
        if deleted:
            logger.info("Task %s deleted", task_id)
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def find_all(
        self,
        filters: Optional[TaskFilters] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TaskRead]:
        cursor = (
            self._collection.find(self._build_query(filters))
            .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            .skip(DEFAULT_OFFSET if offset is None else offset)
            .limit(DEFAULT_LIMIT if limit is None else limit)
        )
        return [self._to_task(document) for document in cursor]

    def find_by_id(self, task_id: str) -> Optional[TaskRead]:
        document = self._collection.find_one({"_id": ObjectId(task_id)})
        return self._to_task(document) if document else None

    def count(self, filters: Optional[TaskFilters] = None) -> int:
        return self._collection.count_documents(self._build_query(filters))

    def ping(self) -> bool:
        try:
            self._collection.database.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_query(filters: Optional[TaskFilters]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if filters is None:
            return query
        if filters.completed is not None:
            query["completed"] = filters.completed
        if filters.search:
            # Literal, case-insensitive substring match.
            pattern = {"$regex": re.escape(filters.search), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"description": pattern}]
        return query

    @staticmethod
    def _to_task(document: Dict[str, Any]) -> TaskRead:
        return TaskRead(
            id=str(document["_id"]),
            title=document["title"],
            description=document.get("description"),
            completed=bool(document.get("completed", False)),
            created_at=_as_utc(document["createdAt"]),
            updated_at=_as_utc(document["updatedAt"]),
        )
