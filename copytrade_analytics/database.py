"""
Database connection and session management.

This module provides SQLAlchemy async engine configuration, connection pooling,
and the session factory for the P&L snapshot store.
"""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from copytrade_analytics.config import settings

logger = structlog.get_logger(__name__)

# SQLAlchemy declarative base for ORM models
Base = declarative_base()


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create and configure async SQLAlchemy engine.

    Pool sizing only applies to server databases; SQLite (tests) uses the
    driver's default pool.

    Args:
        database_url: Override for settings.database_url

    Returns:
        AsyncEngine: Configured async database engine
    """
    url = database_url or settings.database_url
    engine_kwargs: dict[str, Any] = {"echo": settings.db_echo}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=settings.db_pool_recycle,
        )

    engine = create_async_engine(url, **engine_kwargs)

    @event.listens_for(engine.sync_engine, "connect")
    def receive_connect(dbapi_conn: Any, connection_record: Any) -> None:
        """Log successful database connections."""
        logger.debug("database_connection_established")

    return engine


# Global engine instance
# Creation is deferred in environments where the async driver is unavailable
try:
    engine: AsyncEngine | None = create_engine()
except Exception as e:
    logger.warning("database_engine_creation_failed", error=str(e))
    engine = None

# Async session factory
async_session_maker = (
    async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    if engine
    else None
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Yields:
        AsyncSession: Database session, closed after the request

    Example:
        ```python
        @router.post("/calculator/rolling")
        async def rolling(db: AsyncSession = Depends(get_db)):
            repository = PnLSnapshotRepository(db)
        ```
    """
    if async_session_maker is None:
        raise RuntimeError(
            "Database not initialized. Please ensure DATABASE_URL is configured correctly."
        )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(target: AsyncEngine | None = None) -> None:
    """
    Create all tables defined on Base.

    For development and tests; production schemas are managed by the
    snapshot ingestion service.
    """
    # Register ORM models on Base
    from copytrade_analytics.repositories import models  # noqa: F401

    target = target or engine
    if target is None:
        raise RuntimeError("Database not initialized")
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_schema_initialized")
