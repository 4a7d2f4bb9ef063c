"""Pytest fixtures for the Progress Tracker API tests.

MongoDB is replaced by ``mongomock`` collections, so the suite needs no
running database.
"""

import mongomock
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from progress_tracker_api.app.core.config import Settings
from progress_tracker_api.app.main import create_app
from progress_tracker_api.app.repositories.mongo_task_repository import MongoTaskRepository


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongodb_host="localhost",
        mongodb_username="admin",
        mongodb_password="password",
        mongodb_database="progress_test",
    )


@pytest.fixture
def collection():
    """A fresh, empty in-memory tasks collection."""
    return mongomock.MongoClient().progress_test.tasks


@pytest.fixture
def repository(collection) -> MongoTaskRepository:
    return MongoTaskRepository(collection)


@pytest.fixture
def app(settings: Settings, repository: MongoTaskRepository) -> FastAPI:
    return create_app(settings, repository)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client for the API."""
    return TestClient(app)
