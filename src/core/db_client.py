"""SQLite connection management and transaction boundaries."""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from src.core.config import settings


logger = logging.getLogger(__name__)

# Same text layout SQLite produces with strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
STORE_CLOCK_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO text with millisecond precision."""
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def fold_case(value: str | None) -> str | None:
    """Unicode-aware lowercase, registered on every connection as ``fold_case(x)``.

    SQLite's built-in LOWER() only folds ASCII letters.
    """
    return value.lower() if isinstance(value, str) else value


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_tx_locks: dict[tuple[int, int, str], asyncio.Lock] = {}
_db_lock = asyncio.Lock()


def _cache_key(db_path: str | None) -> tuple[int, int, str]:
    loop = asyncio.get_running_loop()
    return (threading.get_ident(), id(loop), str(get_db_path(db_path)))


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)
    thread_id, loop_id, path_str = cache_key

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    # Create new connection with async lock to prevent races
    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path = Path(path_str)
        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(path_str)
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA journal_mode = WAL")
        await conn.create_function("fold_case", 1, fold_case, deterministic=True)

        _db_connections[cache_key] = conn
        _tx_locks[cache_key] = asyncio.Lock()

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": path_str, "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    cache_key = _cache_key(db_path)
    thread_id, loop_id, path_str = cache_key

    if cache_key not in _db_connections:
        return

    try:
        async with _db_lock:
            conn = _db_connections.pop(cache_key, None)
            _tx_locks.pop(cache_key, None)
            if conn is not None:
                await conn.close()
                logger.info(
                    "Closed SQLite connection",
                    extra={"thread_id": thread_id, "loop_id": loop_id, "db_path": path_str},
                )
    except Exception as e:
        logger.warning(
            "Error closing SQLite connection",
            extra={"error": str(e), "thread_id": thread_id, "loop_id": loop_id},
        )


@asynccontextmanager
async def transaction(*, db_path: str | None = None) -> AsyncIterator[aiosqlite.Connection]:
    """Run a block of statements as one all-or-nothing unit of work.

    Commits when the block exits normally and rolls back on any exception,
    which is then re-raised. Transactions on the same cached connection are
    serialized.
    """
    conn = await get_connection(db_path=db_path)
    lock = _tx_locks[_cache_key(db_path)]

    async with lock:
        try:
            yield conn
        except BaseException:
            await conn.rollback()
            raise
        await conn.commit()


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    schema = __import__("src.core.schema", fromlist=["init_db"])
    await schema.init_db(db_path=db_path)
