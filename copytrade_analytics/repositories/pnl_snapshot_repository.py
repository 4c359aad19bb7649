"""
P&L snapshot repository.

Read-only access to the snapshot store: cumulative P&L history per trader,
trader display profiles, and data ranges. The ingestion service stores
addresses in lower case; lookups lower-case their inputs and compare the
raw column so the (trader_address, time) index stays usable. Period
bucketing happens in Python (see analytics.period_extractor) so results do
not depend on the backing database's date functions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from copytrade_analytics.analytics.base import Granularity, PeriodPoint, PnLSnapshot
from copytrade_analytics.analytics.period_extractor import extract_period_deltas, to_utc
from copytrade_analytics.repositories.models import PnLSnapshotModel, TrackedTraderModel

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TraderProfile:
    """Display attributes of a tracked trader."""

    address: str
    alias: str
    color: Optional[str]


@dataclass(frozen=True)
class TraderDataRange:
    """First and last snapshot time for one trader."""

    address: str
    first_snapshot: datetime
    last_snapshot: datetime


def _normalize(addresses: Sequence[str]) -> list[str]:
    return sorted({address.lower() for address in addresses})


class PnLSnapshotRepository:
    """
    Repository for P&L snapshot queries.

    Example:
        ```python
        repository = PnLSnapshotRepository(session)
        deltas = await repository.fetch_period_deltas(addresses, Granularity.DAY)
        ```
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get_snapshots(
        self,
        addresses: Sequence[str],
        since: Optional[datetime] = None,
    ) -> dict[str, list[PnLSnapshot]]:
        """
        Load cumulative P&L snapshots for a set of traders.

        Args:
            addresses: Trader addresses (any case)
            since: Only snapshots at or after this time

        Returns:
            Snapshots ascending by time, keyed by lower-cased address.
            Traders without snapshots are absent.
        """
        keys = _normalize(addresses)
        if not keys:
            return {}

        stmt = select(
            PnLSnapshotModel.trader_address,
            PnLSnapshotModel.time,
            PnLSnapshotModel.total_pnl,
        ).where(PnLSnapshotModel.trader_address.in_(keys))
        if since is not None:
            stmt = stmt.where(PnLSnapshotModel.time >= since)
        stmt = stmt.order_by(PnLSnapshotModel.trader_address, PnLSnapshotModel.time)

        result = await self.session.execute(stmt)

        snapshots: dict[str, list[PnLSnapshot]] = {}
        row_count = 0
        for address, time, total_pnl in result.all():
            snapshots.setdefault(address.lower(), []).append(
                PnLSnapshot(time=time, cumulative_pnl=float(total_pnl))
            )
            row_count += 1

        logger.debug(
            "pnl_snapshots_loaded",
            trader_count=len(snapshots),
            row_count=row_count,
            since=since.isoformat() if since else None,
        )
        return snapshots

    async def fetch_period_deltas(
        self,
        addresses: Sequence[str],
        granularity: Granularity,
        since: Optional[datetime] = None,
    ) -> dict[str, list[PeriodPoint]]:
        """
        Load per-period P&L deltas for a set of traders.

        Args:
            addresses: Trader addresses (any case)
            granularity: Bucket size
            since: Only snapshots at or after this time feed the deltas

        Returns:
            PeriodPoint lists keyed by lower-cased address
        """
        snapshots = await self.get_snapshots(addresses, since=since)
        return {
            address: extract_period_deltas(trader_snapshots, granularity)
            for address, trader_snapshots in snapshots.items()
        }

    async def get_trader_profiles(self, addresses: Sequence[str]) -> dict[str, TraderProfile]:
        """
        Load alias and colour for tracked traders.

        Returns:
            TraderProfile keyed by lower-cased address; unknown traders are absent
        """
        keys = _normalize(addresses)
        if not keys:
            return {}

        stmt = select(TrackedTraderModel).where(TrackedTraderModel.address.in_(keys))
        result = await self.session.execute(stmt)

        return {
            trader.address.lower(): TraderProfile(
                address=trader.address.lower(),
                alias=trader.alias,
                color=trader.color,
            )
            for trader in result.scalars().all()
        }

    async def get_trader_timelines(self, addresses: Sequence[str]) -> list[TraderDataRange]:
        """
        Load the first and last snapshot time per trader.

        Returns:
            TraderDataRange list ordered by first snapshot, then address
        """
        keys = _normalize(addresses)
        if not keys:
            return []

        stmt = (
            select(
                PnLSnapshotModel.trader_address.label("address"),
                func.min(PnLSnapshotModel.time).label("first_snapshot"),
                func.max(PnLSnapshotModel.time).label("last_snapshot"),
            )
            .where(PnLSnapshotModel.trader_address.in_(keys))
            .group_by(PnLSnapshotModel.trader_address)
        )
        result = await self.session.execute(stmt)

        ranges = [
            TraderDataRange(
                address=row.address,
                first_snapshot=row.first_snapshot,
                last_snapshot=row.last_snapshot,
            )
            for row in result.all()
        ]
        # SQLite returns naive datetimes
        ranges.sort(key=lambda r: (to_utc(r.first_snapshot), r.address))
        return ranges
