"""Unit tests for PnLSnapshotRepository against an in-memory SQLite store."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.dialects import postgresql

from copytrade_analytics.analytics.base import Granularity
from copytrade_analytics.repositories.models import PnLSnapshotModel, TrackedTraderModel
from copytrade_analytics.repositories.pnl_snapshot_repository import PnLSnapshotRepository

TRADER_A = "0xaaa"
TRADER_B = "0xbbb"


def snapshot(address: str, time: datetime, total: str) -> PnLSnapshotModel:
    return PnLSnapshotModel(
        trader_address=address,
        time=time,
        realized_pnl=Decimal(total),
        unrealized_pnl=Decimal("0"),
        total_pnl=Decimal(total),
        position_count=1,
    )


@pytest_asyncio.fixture
async def seeded_session(db_session):
    """Two tracked traders; B starts trading before A."""
    db_session.add_all(
        [
            TrackedTraderModel(address=TRADER_A, alias="Alpha", color="#00D9FF", is_active=True),
            TrackedTraderModel(address=TRADER_B, alias="Bravo", color=None, is_active=True),
        ]
    )
    db_session.add_all(
        [
            snapshot(TRADER_A, datetime(2024, 1, 2, 9, 0), "100"),
            snapshot(TRADER_A, datetime(2024, 1, 2, 21, 0), "150.5"),
            snapshot(TRADER_A, datetime(2024, 1, 3, 8, 0), "120"),
            snapshot(TRADER_A, datetime(2024, 1, 5, 8, 0), "300"),
            snapshot(TRADER_B, datetime(2024, 1, 1, 12, 0), "-10"),
            snapshot(TRADER_B, datetime(2024, 1, 2, 12, 0), "40"),
        ]
    )
    await db_session.commit()
    return db_session


@pytest.fixture
def repository(seeded_session):
    """Create repository over the seeded session."""
    return PnLSnapshotRepository(seeded_session)


class TestGetSnapshots:
    """Tests for get_snapshots method."""

    @pytest.mark.asyncio
    async def test_grouped_and_ordered(self, repository):
        snapshots = await repository.get_snapshots([TRADER_A, TRADER_B])

        assert set(snapshots) == {TRADER_A, TRADER_B}
        assert [s.cumulative_pnl for s in snapshots[TRADER_A]] == [100.0, 150.5, 120.0, 300.0]
        assert [s.time.day for s in snapshots[TRADER_B]] == [1, 2]

    @pytest.mark.asyncio
    async def test_addresses_matched_case_insensitively(self, repository):
        snapshots = await repository.get_snapshots(["0xAAA"])

        assert list(snapshots) == [TRADER_A]

    @pytest.mark.asyncio
    async def test_since_filter(self, repository):
        snapshots = await repository.get_snapshots(
            [TRADER_A], since=datetime(2024, 1, 3, tzinfo=UTC)
        )

        assert [s.cumulative_pnl for s in snapshots[TRADER_A]] == [120.0, 300.0]

    @pytest.mark.asyncio
    async def test_unknown_trader_absent(self, repository):
        assert await repository.get_snapshots(["0xnobody"]) == {}


class TestFetchPeriodDeltas:
    """Tests for fetch_period_deltas method."""

    @pytest.mark.asyncio
    async def test_daily_deltas(self, repository):
        deltas = await repository.fetch_period_deltas([TRADER_A, TRADER_B], Granularity.DAY)

        assert [(d.period_end.day, d.value) for d in deltas[TRADER_A]] == [
            (3, pytest.approx(-30.5)),
            (5, pytest.approx(180.0)),
        ]
        assert [d.value for d in deltas[TRADER_B]] == [pytest.approx(50.0)]

    @pytest.mark.asyncio
    async def test_hourly_deltas(self, repository):
        deltas = await repository.fetch_period_deltas([TRADER_A], Granularity.HOUR)

        assert len(deltas[TRADER_A]) == 3
        assert deltas[TRADER_A][0].period_end == datetime(2024, 1, 2, 21, tzinfo=UTC)


class TestTraderProfiles:
    """Tests for get_trader_profiles method."""

    @pytest.mark.asyncio
    async def test_profiles(self, repository):
        profiles = await repository.get_trader_profiles([TRADER_A, "0xBBB", "0xnobody"])

        assert profiles[TRADER_A].alias == "Alpha"
        assert profiles[TRADER_A].color == "#00D9FF"
        assert profiles[TRADER_B].color is None
        assert "0xnobody" not in profiles


class TestTraderTimelines:
    """Tests for get_trader_timelines method."""

    @pytest.mark.asyncio
    async def test_ordered_by_first_snapshot(self, repository):
        timelines = await repository.get_trader_timelines([TRADER_A, TRADER_B])

        assert [t.address for t in timelines] == [TRADER_B, TRADER_A]
        assert timelines[1].first_snapshot.replace(tzinfo=None) == datetime(2024, 1, 2, 9, 0)
        assert timelines[1].last_snapshot.replace(tzinfo=None) == datetime(2024, 1, 5, 8, 0)


class TestEmptyAddressList:
    """No query is issued for an empty address list."""

    @pytest.mark.asyncio
    async def test_no_query(self):
        session = AsyncMock()
        repository = PnLSnapshotRepository(session)

        assert await repository.get_snapshots([]) == {}
        assert await repository.fetch_period_deltas([], Granularity.DAY) == {}
        assert await repository.get_trader_profiles([]) == {}
        assert await repository.get_trader_timelines([]) == []
        session.execute.assert_not_awaited()


class TestAddressFilter:
    """Address filters compare the raw column so the trader/time index applies."""

    @pytest.fixture
    def session(self):
        result = MagicMock()
        result.all.return_value = []
        result.scalars.return_value.all.return_value = []
        session = AsyncMock()
        session.execute.return_value = result
        return session

    @pytest.mark.asyncio
    async def test_no_lower_on_column(self, session):
        repository = PnLSnapshotRepository(session)

        await repository.get_snapshots(["0xAAA"])
        await repository.get_trader_profiles(["0xAAA"])
        await repository.get_trader_timelines(["0xAAA"])

        assert session.execute.await_count == 3
        for call in session.execute.await_args_list:
            sql = str(call.args[0].compile(dialect=postgresql.dialect()))
            assert "lower(" not in sql
            assert " IN " in sql
