"""
SQLAlchemy ORM models for the snapshot store.

Mirrors the dashboard schema: tracked traders keyed by lower-case wallet
address, and a TimescaleDB hypertable of cumulative P&L snapshots.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    DECIMAL,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from copytrade_analytics.database import Base


class TrackedTraderModel(Base):
    """Trader followed by the dashboard."""

    __tablename__ = "tracked_traders"

    address: Mapped[str] = mapped_column(Text, primary_key=True)
    alias: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class PnLSnapshotModel(Base):
    """
    Cumulative P&L snapshot for one trader.

    Configured as a TimescaleDB hypertable partitioned by time in production.
    """

    __tablename__ = "pnl_snapshots"

    trader_address: Mapped[str] = mapped_column(
        Text,
        ForeignKey("tracked_traders.address", ondelete="CASCADE"),
        primary_key=True,
    )
    time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        primary_key=True,
    )
    realized_pnl: Mapped[Decimal] = mapped_column(DECIMAL(20, 6), nullable=False)
    unrealized_pnl: Mapped[Decimal] = mapped_column(DECIMAL(20, 6), nullable=False)
    total_pnl: Mapped[Decimal] = mapped_column(DECIMAL(20, 6), nullable=False)
    position_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_pnl_snapshots_trader_time", "trader_address", "time"),
    )
