"""Snapshot store access: ORM models and repositories."""

from copytrade_analytics.repositories.pnl_snapshot_repository import (
    PnLSnapshotRepository,
    TraderDataRange,
    TraderProfile,
)

__all__ = ["PnLSnapshotRepository", "TraderDataRange", "TraderProfile"]
