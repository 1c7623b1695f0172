"""
Store client: one explicitly constructed engine + session factory per app.

The Database instance is built in the application lifespan from Settings
and kept on ``app.state.database``. Request handlers get a scoped session
through the ``get_db`` dependency; nothing here is a module-level global.

Session scope:
  - commit on normal exit, rollback on exception, always released
  - a warning is logged when a session is held longer than
    DB_CHECKOUT_WARN_SECONDS (surfaces leaked or stalled checkouts,
    nothing is cancelled)
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Database:
    def __init__(self, engine: AsyncEngine, checkout_warn_seconds: float = 5.0):
        self.engine = engine
        self.checkout_warn_seconds = checkout_warn_seconds
        self._sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
        )
        logger.info(
            "database_configured",
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        return cls(engine, checkout_warn_seconds=settings.DB_CHECKOUT_WARN_SECONDS)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        started = time.perf_counter()
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                held = time.perf_counter() - started
                if held > self.checkout_warn_seconds:
                    logger.warning(
                        "db_session_held_too_long",
                        held_seconds=round(held, 2),
                        threshold_seconds=self.checkout_warn_seconds,
                    )

    async def ping(self) -> bool:
        async with self.session() as session:
            return await ping(session)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def ping(session: AsyncSession) -> bool:
    """Round-trip a trivial query; False when the database is unreachable."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error("database_ping_failed", error=str(e))
        await session.rollback()
        return False


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session scoped to the request."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
