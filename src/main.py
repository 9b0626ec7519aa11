"""taskapp - task records with optimistic concurrency and paged search."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core import db_client
from src.core.config import constants
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.task_router import register_exception_handlers, router as task_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Set up logging and the schema on startup; release the connection on shutdown."""
    configure_logfire()

    await db_client.init_db()
    logger.info("startup_complete", extra={"db_path": str(db_client.get_db_path())})

    yield

    await db_client.close_connection()
    logger.info("shutdown_complete")


app = FastAPI(
    title="taskapp",
    description="Task records with optimistic concurrency and paged search",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_fastapi(app)

app.include_router(task_router)
register_exception_handlers(app)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness probe."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)


@app.get("/health/db")
async def database_health_check() -> JSONResponse:
    """Readiness probe: the task table must be reachable."""
    try:
        conn = await db_client.get_connection()
        async with conn.execute("SELECT COUNT(*) FROM tasks") as cursor:
            row = await cursor.fetchone()
    except aiosqlite.Error as e:
        logger.error("database_health_check_failed", extra={"error": str(e)})
        return JSONResponse(
            content={"status": "critical", "error": str(e)},
            status_code=constants.HTTP_SERVICE_UNAVAILABLE,
        )

    return JSONResponse(content={"status": "healthy", "tasks": row[0]}, status_code=constants.HTTP_OK)
