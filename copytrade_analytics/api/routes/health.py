"""Health check endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from copytrade_analytics.api.dependencies import get_db_session

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint for Docker and monitoring."""
    return {"status": "healthy"}


@router.get("/api/v1/health")
async def detailed_health_check(
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, str]:
    """Health check including snapshot store connectivity."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed. Please try again later.",
        ) from e

    return {"status": "healthy", "database": "connected"}
