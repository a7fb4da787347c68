"""Create or drop the database schema for all registered models."""

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from .base import Base
from .session import get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata
from userbase.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


async def create_all() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Created tables: %s", ", ".join(Base.metadata.tables))


async def drop_all() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Dropped tables: %s", ", ".join(Base.metadata.tables))


if __name__ == "__main__":
    setup_logging()
    try:
        asyncio.run(create_all())
        logger.info("Database tables created successfully.")
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
