# This project was developed with assistance from AI tools.
"""Async engine, session factory and declarative base.

The engine is created lazily from ``DATABASE_URL`` so importing the models
never opens a connection. SQLite URLs (local runs and tests) get a static
connection pool when in-memory so the database survives across sessions.
"""

import logging
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import db_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str, echo: bool) -> dict:
    """Return dialect-specific engine options for SQLite vs PostgreSQL."""
    kwargs: dict = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.endswith("://"):
            kwargs["poolclass"] = StaticPool
    return kwargs


class DatabaseService:
    """Owns one async engine and the session factory bound to it."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **_engine_kwargs(url, echo))
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def init_db(self) -> None:
        """Create all tables that do not exist yet."""
        # Registers the mapped classes on Base.metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def dispose(self) -> None:
        await self.engine.dispose()


_service: DatabaseService | None = None


def get_db_service() -> DatabaseService:
    """Return the process-wide DatabaseService, creating it on first use."""
    global _service  # noqa: PLW0603
    if _service is None:
        _service = DatabaseService(db_settings.DATABASE_URL, echo=db_settings.SQL_ECHO)
    return _service


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session that rolls back on error."""
    async with get_db_service().session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
