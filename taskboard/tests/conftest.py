"""Shared fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from taskboard.crud import MemStorage
from taskboard.dependencies.store import get_notification_center, get_storage
from taskboard.main import app
from taskboard.models import Task, TaskPriority
from taskboard.services.reminders import NotificationCenter

# Fixed reference instant: a Tuesday, mid-day
NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def storage() -> MemStorage:
    """Empty store with just the demo user."""
    store = MemStorage(seed=False)
    store.create_user("demo", "password")
    return store


@pytest.fixture
def center() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def client(storage: MemStorage, center: NotificationCenter):
    """Test client wired to a fresh store and notification center."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notification_center] = lambda: center
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_task():
    """Build detached Task records for the pure engines."""
    counter = iter(range(1, 10_000))

    def _make(**fields) -> Task:
        data = {
            "id": next(counter),
            "user_id": 1,
            "title": "Task",
            "priority": TaskPriority.MEDIUM,
            "created_at": NOW,
        }
        data.update(fields)
        return Task(**data)

    return _make
