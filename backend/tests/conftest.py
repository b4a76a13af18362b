"""Shared fixtures: the app wired to an in-memory Mongo."""

import asyncio
import os

import pytest

# Never touch a real database from tests
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "exercise_tracker_test")

from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from database import create_indexes, get_db
from main import app


@pytest.fixture
def db():
    mock_db = AsyncMongoMockClient()["exercise_tracker_test"]
    asyncio.run(create_indexes(mock_db))
    return mock_db


@pytest.fixture
def client(db):
    # Not used as a context manager, so the startup ping to a real server is skipped.
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(client):
    def _create(username):
        response = client.post("/api/users", json={"username": username})
        assert response.status_code == 201
        return response.json()["_id"]

    return _create


@pytest.fixture
def add_exercise(client):
    def _add(user_id, description="run", duration=30, date=None):
        body = {"description": description, "duration": duration}
        if date is not None:
            body["date"] = date
        response = client.post(f"/api/users/{user_id}/exercises", json=body)
        assert response.status_code == 201
        return response.json()

    return _add


@pytest.fixture
def count_documents(db):
    def _count(collection, query=None):
        return asyncio.run(db[collection].count_documents(query or {}))

    return _count
