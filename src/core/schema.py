"""SQLite schema for the tasks table (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


TASKS_TABLE = f"""
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL CHECK (status IN ('OPEN', 'DOING', 'DONE')),
    due_date TEXT,
    version INTEGER NOT NULL DEFAULT 0 CHECK (version >= 0),
    created_at TEXT NOT NULL DEFAULT ({db_client.STORE_CLOCK_SQL}),
    updated_at TEXT NOT NULL DEFAULT ({db_client.STORE_CLOCK_SQL})
)
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks (created_at DESC, id DESC)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks (status)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create the tasks table and its indexes (idempotent)."""
    conn = await db_client.get_connection(db_path=db_path)

    await conn.execute(TASKS_TABLE)
    for statement in INDEXES:
        await conn.execute(statement)
    await conn.commit()

    logger.info("Schema initialized", extra={"db_path": str(db_client.get_db_path(db_path))})
