"""Pytest configuration and fixtures for unit tests."""

import pytest

from tests.unit.mocks import InMemoryTaskStore


@pytest.fixture
def in_memory_store() -> InMemoryTaskStore:
    """Provides a fresh InMemoryTaskStore for each test."""
    return InMemoryTaskStore()


@pytest.fixture
def patched_task_store(monkeypatch: pytest.MonkeyPatch, in_memory_store: InMemoryTaskStore) -> InMemoryTaskStore:
    """Patches src.core.task_store functions and db_client.transaction to use InMemoryTaskStore."""
    monkeypatch.setattr("src.core.task_store.insert_task", in_memory_store.insert_task)
    monkeypatch.setattr("src.core.task_store.find_task_by_id", in_memory_store.find_task_by_id)
    monkeypatch.setattr("src.core.task_store.update_task_with_version", in_memory_store.update_task_with_version)
    monkeypatch.setattr("src.core.task_store.delete_task_by_id", in_memory_store.delete_task_by_id)
    monkeypatch.setattr("src.core.task_store.search_tasks", in_memory_store.search_tasks)
    monkeypatch.setattr("src.core.task_store.count_tasks", in_memory_store.count_tasks)
    monkeypatch.setattr("src.core.db_client.transaction", in_memory_store.transaction)

    return in_memory_store
