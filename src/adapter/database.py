"""
Storage initialization

Creates the identities and memberships tables and every index they declare.
Safe to run on every startup.
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

# Registers the tables on SQLModel.metadata
import src.domain.entities  # noqa: F401

logger = logging.getLogger(__name__)


def _create_schema(connection) -> None:
    SQLModel.metadata.create_all(connection, checkfirst=True)
    # create_all skips indexes of tables that already exist
    for table in SQLModel.metadata.sorted_tables:
        for index in table.indexes:
            index.create(connection, checkfirst=True)


async def init_storage(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(_create_schema)
    logger.info("Storage initialized: tables and indexes are in place")


async def check_storage(engine: AsyncEngine) -> bool:
    """Readiness probe: True when the database answers a trivial query"""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Storage readiness check failed")
        return False
    return True
