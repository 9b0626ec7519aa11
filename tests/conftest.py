"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Generator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.core import db_client
from src.core.config import settings
from src.domain.create_models import TaskCreate
from src.domain.task import TaskStatus
from src.domain.update_models import TaskUpdate
from src.main import app


def make_task_create(**overrides: Any) -> TaskCreate:
    """Build a valid TaskCreate, overriding any field."""
    data: dict[str, Any] = {
        "title": "Write report",
        "description": "Quarterly numbers",
        "status": TaskStatus.OPEN,
        "due_date": date.today(),
    }
    data.update(overrides)
    return TaskCreate(**data)


def make_task_update(**overrides: Any) -> TaskUpdate:
    """Build a valid TaskUpdate, overriding any field."""
    data: dict[str, Any] = {
        "title": "Write report (final)",
        "description": "Quarterly numbers, reviewed",
        "status": TaskStatus.DOING,
        "due_date": None,
    }
    data.update(overrides)
    return TaskUpdate(**data)


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the application at a fresh SQLite file for this test."""
    path = str(tmp_path / "tasks.db")
    monkeypatch.setattr(settings, "sqlite_db_path", path)
    return path


@pytest.fixture
async def sqlite_db(db_path: str) -> AsyncIterator[str]:
    """Initialized SQLite database; the cached connection is closed afterwards."""
    await db_client.init_db()
    yield db_path
    await db_client.close_connection()


@pytest.fixture
def api_client(db_path: str) -> Generator[TestClient]:
    """Test client running the full application lifespan against a fresh database."""
    with TestClient(app) as client:
        yield client
