"""
Repository layer.

``TaskRepository`` defines the storage contract; ``MongoTaskRepository``
implements it on top of a MongoDB collection.  The repository is the
only component that writes persisted state.
"""

from .task_repository import TaskRepository
from .mongo_task_repository import MongoTaskRepository

__all__ = ["TaskRepository", "MongoTaskRepository"]
