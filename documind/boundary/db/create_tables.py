"""
Database table creation script.

Installs the pgvector extension and creates all ORM tables. Schema
migrations proper are handled outside this repository.

Dependencies: sqlalchemy, asyncpg, documind.configs

Usage:
    python -m documind.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text

from documind.boundary.db.base import Base
from documind.boundary.db.connection import get_async_engine
from documind.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create the vector extension and all tables. Idempotent.

    Raises:
        SQLAlchemyError: If the connection or DDL fails
    """
    engine = get_async_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"{__name__}:create_all_tables - tables created")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_all_tables())
