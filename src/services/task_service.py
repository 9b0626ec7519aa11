"""Task service: create, fetch, optimistic update, delete and paged search."""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core import db_client, task_store
from src.core.config import constants
from src.core.errors import InvalidArgumentError, NotFoundError, VersionConflictError
from src.core.logging import log_with_context, span
from src.domain.create_models import TaskCreate
from src.domain.task import Task, TaskStatus
from src.domain.update_models import TaskUpdate
from src.models.service_models import TaskPage


logger = logging.getLogger(__name__)


def normalize_page(page: int, size: int) -> tuple[int, int]:
    """Clamp paging parameters into the supported range.

    Negative pages become 0, non-positive sizes fall back to the default
    page size and oversized requests are capped at the maximum.
    """
    page = max(page, 0)
    if size <= 0:
        size = constants.DEFAULT_PAGE_SIZE
    size = min(size, constants.MAX_PAGE_SIZE)
    return page, size


async def create_task(*, data: TaskCreate | None) -> Task:
    """Create a new task.

    Args:
        data: Title, description, status and due date of the new task

    Returns:
        The task as persisted, re-read from the database

    Raises:
        InvalidArgumentError: If no payload was given
    """
    with span("task_service.create_task"):
        if data is None:
            raise InvalidArgumentError("Task payload must not be empty")

        record: dict[str, Any] = data.model_dump()
        now = datetime.now(UTC)
        record.setdefault("version", 0)
        record.setdefault("created_at", now)
        record.setdefault("updated_at", now)

        async with db_client.transaction():
            task_id = await task_store.insert_task(data=record)
            created = await task_store.find_task_by_id(task_id=task_id)

        if created is None:
            raise NotFoundError(task_id)

        logger.info("Created task: %s (id: %s)", created.title, created.id)
        return created


async def get_task(*, task_id: int) -> Task:
    """Get task by ID.

    Raises:
        NotFoundError: If task not found
    """
    with span("task_service.get_task"):
        task = await task_store.find_task_by_id(task_id=task_id)
        if task is None:
            log_with_context(logger, "warning", "Task not found", task_id=task_id)
            raise NotFoundError(task_id)
        return task


async def update_task(*, task_id: int, expected_version: int, data: TaskUpdate | None) -> Task:
    """Replace a task's content if the caller holds the current version.

    The write is a single conditional update. When it touches no row, one
    extra read tells a deleted task apart from a concurrently modified one.
    Conflicts are returned to the caller and never retried here.

    Args:
        task_id: Task ID
        expected_version: Version the caller last saw
        data: Full replacement content (no partial merge)

    Returns:
        Updated task with version = expected_version + 1

    Raises:
        InvalidArgumentError: If no payload was given
        NotFoundError: If task not found
        VersionConflictError: If the stored version differs from expected_version
    """
    with span("task_service.update_task"):
        if data is None:
            raise InvalidArgumentError("Task payload must not be empty")

        async with db_client.transaction():
            updated_rows = await task_store.update_task_with_version(
                task_id=task_id,
                expected_version=expected_version,
                data=data.model_dump(),
            )
            current = await task_store.find_task_by_id(task_id=task_id)

        if current is None:
            log_with_context(logger, "warning", "Task not found", task_id=task_id)
            raise NotFoundError(task_id)

        if updated_rows == 0:
            log_with_context(
                logger,
                "warning",
                "Version conflict",
                task_id=task_id,
                expected=expected_version,
                actual=current.version,
            )
            raise VersionConflictError(task_id, expected=expected_version, actual=current.version)

        logger.info("Updated task %s to version %s", task_id, current.version)
        return current


async def delete_task(*, task_id: int) -> None:
    """Delete a task unconditionally.

    Raises:
        NotFoundError: If task not found
    """
    with span("task_service.delete_task"):
        async with db_client.transaction():
            deleted = await task_store.delete_task_by_id(task_id=task_id)

        if deleted == 0:
            log_with_context(logger, "warning", "Task not found", task_id=task_id)
            raise NotFoundError(task_id)

        logger.info("Deleted task %s", task_id)


async def search_tasks(
    *,
    status: TaskStatus | None = None,
    keyword: str | None = "",
    page: int = 0,
    size: int = constants.DEFAULT_PAGE_SIZE,
) -> TaskPage:
    """Search tasks with optional status and title keyword filters.

    Content and total come from two separate reads, so a concurrent write
    between them can make total disagree with the pages by a few rows.
    Pages beyond the largest offset SQLite accepts come back empty.

    Args:
        status: Exact status filter (None for all)
        keyword: Case-insensitive substring of the title (empty for all)
        page: Zero-based page number
        size: Requested page length

    Returns:
        TaskPage with the normalized page and size
    """
    with span("task_service.search_tasks"):
        page, size = normalize_page(page, size)
        offset = page * size

        if offset > constants.MAX_SEARCH_OFFSET:
            # Past any row the table can hold
            content: list[Task] = []
        else:
            content = await task_store.search_tasks(status=status, keyword=keyword, offset=offset, limit=size)
        total = await task_store.count_tasks(status=status, keyword=keyword)

        logger.debug("Retrieved %d of %d tasks (page=%d, size=%d)", len(content), total, page, size)
        return TaskPage(content=content, page=page, size=size, total=total)
