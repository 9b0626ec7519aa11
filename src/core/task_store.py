"""SQLite-backed task store.

Write functions do not commit; callers wrap them in ``db_client.transaction()``.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

import aiosqlite

from src.core import db_client
from src.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)

_INSERT_COLUMNS = ("title", "description", "status", "due_date", "version", "created_at", "updated_at")
_REPLACE_COLUMNS = ("title", "description", "status", "due_date")


def _to_db_value(value: Any) -> Any:
    """Convert a Python value to its stored SQLite representation."""
    if isinstance(value, datetime):
        return db_client.format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so they match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _build_filter(*, status: TaskStatus | None, keyword: str | None) -> tuple[str, list[Any]]:
    """Build the WHERE clause shared by search and count."""
    conditions = []
    params: list[Any] = []

    if status is not None:
        conditions.append("status = ?")
        params.append(_to_db_value(status))

    if keyword:
        # Both sides fold with the same Python function
        conditions.append("fold_case(title) LIKE ? ESCAPE '\\'")
        params.append(f"%{_escape_like(db_client.fold_case(keyword))}%")

    if not conditions:
        return "", params
    return "WHERE " + " AND ".join(conditions), params


def _row_to_task(row: aiosqlite.Row) -> Task:
    return Task.model_validate(dict(row))


async def insert_task(*, data: dict[str, Any]) -> int:
    """Insert a new task row and return its assigned id.

    Columns missing from ``data`` fall back to the table defaults
    (version 0, timestamps from the database clock).
    """
    columns = [key for key in _INSERT_COLUMNS if key in data]
    values = [_to_db_value(data[key]) for key in columns]
    placeholders = ", ".join("?" for _ in columns)

    query = f"INSERT INTO tasks ({', '.join(columns)}) VALUES ({placeholders})"  # noqa: S608 - columns are whitelisted
    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute(query, values)
    except Exception as e:
        logger.error("insert_task_failed", extra={"error": str(e)})
        raise

    task_id = cursor.lastrowid
    logger.info("Inserted task", extra={"task_id": task_id})
    return task_id


async def find_task_by_id(*, task_id: int) -> Task | None:
    """Fetch a single task by id, or None if it does not exist."""
    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("find_task_by_id_failed", extra={"task_id": task_id, "error": str(e)})
        raise

    if row is None:
        return None
    return _row_to_task(row)


async def update_task_with_version(*, task_id: int, expected_version: int, data: dict[str, Any]) -> int:
    """Replace a task's content only if its stored version equals ``expected_version``.

    The version match, the version increment and the updated_at refresh happen
    in a single UPDATE statement. Returns the number of rows affected (0 or 1).
    """
    set_clause = ", ".join(f"{key} = ?" for key in _REPLACE_COLUMNS)
    values = [_to_db_value(data.get(key)) for key in _REPLACE_COLUMNS]
    values.extend([task_id, expected_version])

    query = (
        f"UPDATE tasks SET {set_clause}, version = version + 1, "  # noqa: S608 - columns are whitelisted
        f"updated_at = {db_client.STORE_CLOCK_SQL} "
        "WHERE id = ? AND version = ?"
    )
    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute(query, values)
    except Exception as e:
        logger.error("update_task_with_version_failed", extra={"task_id": task_id, "error": str(e)})
        raise

    logger.debug(
        "Conditional update executed",
        extra={"task_id": task_id, "expected_version": expected_version, "rows": cursor.rowcount},
    )
    return cursor.rowcount


async def delete_task_by_id(*, task_id: int) -> int:
    """Delete a task by id and return the number of rows affected."""
    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    except Exception as e:
        logger.error("delete_task_by_id_failed", extra={"task_id": task_id, "error": str(e)})
        raise

    return cursor.rowcount


async def search_tasks(
    *,
    status: TaskStatus | None = None,
    keyword: str | None = "",
    offset: int = 0,
    limit: int = 20,
) -> list[Task]:
    """List tasks matching the filter, newest first, ties broken by id descending."""
    where_clause, params = _build_filter(status=status, keyword=keyword)
    query = f"SELECT * FROM tasks {where_clause} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"  # noqa: S608
    params.extend([limit, offset])

    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()
    except Exception as e:
        logger.error("search_tasks_failed", extra={"status": status, "keyword": keyword, "error": str(e)})
        raise

    tasks = [_row_to_task(row) for row in rows]
    logger.info("Listed tasks", extra={"count": len(tasks), "offset": offset, "limit": limit})
    return tasks


async def count_tasks(*, status: TaskStatus | None = None, keyword: str | None = "") -> int:
    """Count every task matching the filter, ignoring paging."""
    where_clause, params = _build_filter(status=status, keyword=keyword)
    query = f"SELECT COUNT(*) FROM tasks {where_clause}"  # noqa: S608

    try:
        conn = await db_client.get_connection()
        cursor = await conn.execute(query, params)
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("count_tasks_failed", extra={"status": status, "keyword": keyword, "error": str(e)})
        raise

    return row[0]
