"""SQLAlchemy database session and engine configuration.

The engine is built lazily from the current settings so that connection
properties can be registered (e.g. by container-backed tests) before the
first session is opened. ``reset_engine`` drops the cached engine and
settings so the next call picks up new properties.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from userbase.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if url.startswith("yql+ydb://"):
        return url.replace("yql+ydb://", "yql+ydb_async://", 1)
    return url


def build_database_url(settings: Settings) -> str:
    """Async database URL with separately configured credentials applied."""
    url = make_url(_get_async_url(settings.database_url.strip()))
    if settings.database_username:
        url = url.set(username=settings.database_username)
    if settings.database_password:
        url = url.set(password=settings.database_password)
    return url.render_as_string(hide_password=False)


def build_connect_args(settings: Settings) -> dict[str, Any]:
    """Driver-specific connection arguments (only YDB needs any)."""
    if not settings.database_url.startswith("yql"):
        return {}
    connect_args: dict[str, Any] = {
        "protocol": "grpcs" if settings.database_use_tls else "grpc",
    }
    if settings.database_auth_token:
        connect_args["credentials"] = {"token": settings.database_auth_token}
    return connect_args


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs work on SQLite."""

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@lru_cache
def get_engine() -> AsyncEngine:
    settings = get_settings()
    url = build_database_url(settings)
    logger.info(
        "Creating database engine for %s",
        make_url(url).render_as_string(hide_password=True),
    )
    engine = create_async_engine(
        url,
        echo=settings.database_echo,
        connect_args=build_connect_args(settings),
        future=True,
    )
    if engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(engine)
    return engine


@lru_cache
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Yield a session; commit on success, roll back on error."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def reset_engine() -> None:
    """Dispose the cached engine and forget cached settings."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()
    get_settings.cache_clear()
