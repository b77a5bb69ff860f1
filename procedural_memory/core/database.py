"""
Async SQLAlchemy engine for the sqlite storage backend.

One engine and session factory per process; ``init_database`` creates the
procedures table on first start and ``close_database`` disposes it.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from ..models.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    from .config import get_settings

    return get_settings().database_url


def _is_file_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and bool(url.database) and url.database != ":memory:"


def _ensure_parent_directory(database_url: str) -> None:
    if _is_file_sqlite(database_url):
        Path(make_url(database_url).database).expanduser().parent.mkdir(
            parents=True, exist_ok=True
        )


async def init_database(database_url: Optional[str] = None) -> async_sessionmaker[AsyncSession]:
    """Create the engine, the session factory and any missing tables.

    File-backed SQLite uses NullPool so each session gets its own
    connection; in-memory SQLite keeps the dialect's single shared one.
    """
    global _engine, _session_factory

    url = database_url or get_database_url()
    _ensure_parent_directory(url)

    engine_kwargs = {"echo": False, "pool_pre_ping": True}
    if _is_file_sqlite(url):
        engine_kwargs["poolclass"] = NullPool
    _engine = create_async_engine(url, **engine_kwargs)
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready at %s", make_url(url).render_as_string(hide_password=True))

    return _session_factory


async def close_database() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the active factory, initializing it on demand."""
    factory = _session_factory or await init_database()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.exception("Rolled back database session")
            raise


async def health_check() -> bool:
    """``SELECT 1`` against the active engine; False when not initialized."""
    if _session_factory is None:
        return False
    try:
        async with get_db_session() as session:
            return (await session.execute(text("SELECT 1"))).scalar() == 1
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        return False
