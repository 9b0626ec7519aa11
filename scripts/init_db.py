#!/usr/bin/env python3
"""Create the tasks schema in the configured SQLite database."""

import asyncio
import logging
import sys

from src.core.db_client import close_connection, get_db_path, init_db


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def main(db_path: str | None = None) -> None:
    await init_db(db_path=db_path)
    logger.info(f"Schema ready at {get_db_path(db_path)}")
    await close_connection(db_path=db_path)


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
