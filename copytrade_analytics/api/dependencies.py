"""
FastAPI Dependencies

Provides dependency injection for database sessions, the snapshot
repository and the analytics service.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from copytrade_analytics.database import get_db
from copytrade_analytics.repositories.pnl_snapshot_repository import PnLSnapshotRepository
from copytrade_analytics.services.rolling_analysis_service import RollingAnalysisService


async def get_db_session(
    session: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions.

    Analytics endpoints only read, so any open transaction is rolled back
    once the request finishes.

    Yields:
        AsyncSession: Database session
    """
    try:
        yield session
    finally:
        await session.rollback()


def get_snapshot_repository(
    session: AsyncSession = Depends(get_db_session),
) -> PnLSnapshotRepository:
    """Snapshot repository bound to the request session."""
    return PnLSnapshotRepository(session)


def get_rolling_analysis_service(
    repository: PnLSnapshotRepository = Depends(get_snapshot_repository),
) -> RollingAnalysisService:
    """
    Analytics service for the request.

    Example:
        ```python
        @router.post("/rolling")
        async def rolling(service: RollingAnalysisService = Depends(get_rolling_analysis_service)):
            return await service.compute_rolling_analysis(allocations, "7d")
        ```
    """
    return RollingAnalysisService(repository)
