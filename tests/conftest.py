"""
Pytest configuration and fixtures for the analytics service tests.

Provides shared fixtures for database sessions, test clients, period series
builders and an in-memory snapshot store.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncGenerator, Sequence
from datetime import UTC, datetime, timedelta
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from copytrade_analytics.analytics.base import Granularity, PeriodPoint, PnLSnapshot
from copytrade_analytics.api.main import app
from copytrade_analytics.database import Base, get_db, init_db
from copytrade_analytics.repositories.pnl_snapshot_repository import (
    TraderDataRange,
    TraderProfile,
)

# =============================
# Database Fixtures
# =============================


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """
    Create test database engine.

    Uses in-memory SQLite for fast tests.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for tests.

    Each test gets a fresh session that's rolled back after the test.
    """
    session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide async HTTP client for API testing.

    Overrides the database dependency to use test database.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# =============================
# Series Fixtures
# =============================


def build_periods(
    values: Sequence[float],
    start: datetime = datetime(2024, 1, 2, tzinfo=UTC),
    step: timedelta = timedelta(days=1),
) -> list[PeriodPoint]:
    return [
        PeriodPoint(period_end=start + step * index, value=value)
        for index, value in enumerate(values)
    ]


@pytest.fixture
def make_periods():
    """
    Factory for ascending PeriodPoint series.

    Daily from 2024-01-02 by default; pass ``step=timedelta(hours=1)`` for
    hourly series.
    """
    return build_periods


# =============================
# Snapshot Store Fixtures
# =============================


class FakeSnapshotStore:
    """In-memory snapshot store recording every call."""

    def __init__(
        self,
        deltas: Optional[dict[str, list[PeriodPoint]]] = None,
        snapshots: Optional[dict[str, list[PnLSnapshot]]] = None,
        profiles: Optional[dict[str, TraderProfile]] = None,
        timelines: Optional[list[TraderDataRange]] = None,
        error: Optional[Exception] = None,
    ):
        self.deltas = deltas or {}
        self.snapshots = snapshots or {}
        self.profiles = profiles or {}
        self.timelines = timelines or []
        self.error = error
        self.calls: list[tuple] = []

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def get_snapshots(self, addresses, since=None):
        self._record("get_snapshots", tuple(addresses), since)
        return {
            address: [s for s in self.snapshots[address] if since is None or s.time >= since]
            for address in addresses
            if address in self.snapshots
        }

    async def fetch_period_deltas(self, addresses, granularity: Granularity, since=None):
        self._record("fetch_period_deltas", tuple(addresses), granularity)
        return {address: self.deltas[address] for address in addresses if address in self.deltas}

    async def get_trader_profiles(self, addresses):
        self._record("get_trader_profiles", tuple(addresses))
        return {address: self.profiles[address] for address in addresses if address in self.profiles}

    async def get_trader_timelines(self, addresses):
        self._record("get_trader_timelines", tuple(addresses))
        return [t for t in self.timelines if t.address in addresses]


@pytest.fixture
def make_store():
    """Factory for FakeSnapshotStore instances."""
    return FakeSnapshotStore
