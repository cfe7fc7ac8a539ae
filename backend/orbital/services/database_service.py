# backend/orbital/services/database_service.py
"""
Engine and session owner for Orbital's document tables.

``metadata_items`` and ``meetings`` live in one database reached through a
single async engine. Local runs and tests use SQLite through aiosqlite
(optionally fully in memory); deployments point ``DATABASE_URL`` at
PostgreSQL through asyncpg.

Usage:
    from orbital.services.database_service import database_service

    await database_service.init_db()

    async with database_service.get_session() as session:
        meetings = (await session.execute(select(MeetingRecord))).scalars().all()

    health = await database_service.health_check()
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from orbital.config import settings
from orbital.database.base import Base


class DatabaseService:
    """
    Owns the async engine and hands out unit-of-work sessions.

    Attributes:
        database_url: Async URL the engine was built from
        _engine: Async SQLAlchemy engine
        _session_factory: Factory for ``AsyncSession`` objects
        _logger: ``orbital.database`` logger
    """

    def __init__(self, database_url: Optional[str] = None):
        """
        Args:
            database_url: Use this URL instead of ``settings.database_url``
                (tests pass ``sqlite+aiosqlite:///:memory:``)
        """
        self._logger = logging.getLogger("orbital.database")
        self.database_url = database_url or settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None
        self._initialize_engine()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def _initialize_engine(self) -> None:
        """
        Build the engine for the configured backend.

        SQLite:
            - ``:memory:`` URLs keep one shared connection (StaticPool) so every
              session sees the same tables
            - file URLs get their parent directory created on first use

        PostgreSQL:
            - pool size, overflow and recycle come from settings
            - connections are pinged before reuse
        """
        database_url = self.database_url
        self._logger.info(f"Connecting to {database_url.split('@')[-1].split('?')[0]}")

        if self.is_sqlite:
            engine_kwargs: Dict[str, Any] = {
                "connect_args": {"check_same_thread": False},
                "echo": settings.debug,
            }
            if ":memory:" in database_url:
                engine_kwargs["poolclass"] = StaticPool
            else:
                if ":///" in database_url:
                    db_path = database_url.split("///")[1].split("?")[0]
                    db_dir = os.path.dirname(db_path)
                    if db_dir and not os.path.exists(db_dir):
                        os.makedirs(db_dir, exist_ok=True)
                        self._logger.info(f"Created SQLite directory {db_dir}")
                engine_kwargs["pool_pre_ping"] = True

            self._engine = create_async_engine(database_url, **engine_kwargs)
            self._logger.info("Meetings and metadata stored in SQLite")

        else:
            self._engine = create_async_engine(
                database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=True,
                pool_recycle=settings.db_pool_recycle,
                echo=settings.debug,
            )
            self._logger.info(
                f"Meetings and metadata stored in PostgreSQL "
                f"(pool {settings.db_pool_size}+{settings.db_max_overflow})"
            )

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        One unit of work: committed when the block exits cleanly, rolled back
        (and the error re-raised) otherwise.

        Raises:
            RuntimeError: if no session factory was built
        """
        if not self._session_factory:
            raise RuntimeError("Database not initialized")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def init_db(self) -> None:
        """Create the metadata and meeting tables (and indexes) that are missing."""
        if not self._engine:
            raise RuntimeError("Database engine not initialized")

        async with self._engine.begin() as conn:
            # Registers the record classes on Base.metadata
            from orbital.database import models  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

        self._logger.info("Orbital tables ready")

    async def drop_db(self) -> None:
        """Drop every Orbital table; tests use it to start from scratch."""
        if not self._engine:
            raise RuntimeError("Database engine not initialized")

        async with self._engine.begin() as conn:
            from orbital.database import models  # noqa: F401

            await conn.run_sync(Base.metadata.drop_all)

        self._logger.info("Orbital tables dropped")

    async def health_check(self) -> Dict[str, Any]:
        """
        Ping the database and count stored documents.

        Returns:
            ``status`` ("healthy"/"unhealthy"), ``connected``, ``database_type``
            and, when reachable, ``tables`` with row counts for
            ``metadata_items`` and ``meetings``; otherwise ``error``.
        """
        from orbital.database.models import MeetingRecord, MetadataItemRecord

        db_type = "sqlite" if self.is_sqlite else "postgresql"
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))

                tables = {}
                for name, record in (
                    ("metadata_items", MetadataItemRecord),
                    ("meetings", MeetingRecord),
                ):
                    result = await session.execute(select(func.count()).select_from(record))
                    tables[name] = result.scalar() or 0

            return {
                "status": "healthy",
                "connected": True,
                "database_type": db_type,
                "tables": tables,
            }

        except Exception as e:
            self._logger.error(f"Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "connected": False,
                "database_type": db_type,
                "error": str(e),
            }

    async def close(self) -> None:
        """Dispose pooled connections; the next session opens fresh ones."""
        if self._engine:
            await self._engine.dispose()
            self._logger.info("Database connections released")

    def __repr__(self) -> str:
        db_type = "SQLite" if self.is_sqlite else "PostgreSQL"
        return f"<DatabaseService(type={db_type})>"


# Global singleton instance
database_service = DatabaseService()
