"""
MongoDB integration.

This module provides the client factory used by the application
(``get_client``), access to the tasks collection (``get_tasks_collection``)
and the one-time setup run on application start (``init_db``), which
verifies connectivity and creates the indexes the repository relies on.
The client is created lazily by ``pymongo``: constructing it does not
open a connection, so building the application never blocks on the
database.
"""

import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from .config import Settings


logger = logging.getLogger(__name__)

# Index definitions applied by ``init_db``.  ``find_all`` sorts by
# ``createdAt`` and most listings filter on ``completed``.
TASK_INDEXES = [
    ([("createdAt", DESCENDING), ("_id", DESCENDING)], "createdAt_desc"),
    ([("completed", ASCENDING), ("createdAt", DESCENDING)], "completed_createdAt"),
]


def get_client(settings: Settings) -> MongoClient:
    """Create a MongoDB client for the configured deployment.

    ``tz_aware`` makes the driver return timezone-aware UTC datetimes so
    timestamps round-trip unchanged.  ``connect=False`` defers the first
    connection to the first operation (the startup ping).
    """
    return MongoClient(
        settings.mongo_uri,
        tz_aware=True,
        connect=False,
        serverSelectionTimeoutMS=5000,
    )


def get_tasks_collection(client: MongoClient, settings: Settings) -> Collection:
    """Return the collection holding task documents."""
    return client[settings.mongodb_database][settings.tasks_collection]


def ensure_indexes(collection: Collection) -> None:
    """Create the task indexes if they do not exist yet."""
    for keys, name in TASK_INDEXES:
        collection.create_index(keys, name=name)


def init_db(collection: Collection) -> None:
    """Check the database answers and prepare the tasks collection.

    Raises the driver's error if the server cannot be reached, which
    aborts application startup.
    """
    collection.database.command("ping")
    ensure_indexes(collection)
    logger.info(
        "Connected to MongoDB database '%s', collection '%s'",
        collection.database.name,
        collection.name,
    )
