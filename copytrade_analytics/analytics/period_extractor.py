"""
Period return extraction.

Buckets a trader's cumulative P&L snapshots into UTC-aligned hour or day
buckets, keeps the last observation per bucket, and differences consecutive
present buckets. The first bucket has nothing to difference against and is
dropped. Missing buckets are skipped, never zero-filled.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from copytrade_analytics.analytics.base import Granularity, PeriodPoint, PnLSnapshot


def bucket_start(value: datetime, granularity: Granularity) -> datetime:
    """Return the UTC bucket that contains ``value``.

    Naive datetimes are treated as UTC.
    """
    value = to_utc(value)
    if granularity == Granularity.HOUR:
        return value.replace(minute=0, second=0, microsecond=0)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def last_per_bucket(
    snapshots: Iterable[PnLSnapshot],
    granularity: Granularity,
) -> list[tuple[datetime, float]]:
    """Collapse snapshots to one (bucket, cumulative_pnl) pair per bucket.

    Within a bucket the snapshot with the latest time wins.

    Returns:
        Pairs ordered ascending by bucket
    """
    latest: dict[datetime, PnLSnapshot] = {}
    for snapshot in snapshots:
        bucket = bucket_start(snapshot.time, granularity)
        current = latest.get(bucket)
        if current is None or to_utc(snapshot.time) >= to_utc(current.time):
            latest[bucket] = snapshot

    return [(bucket, latest[bucket].cumulative_pnl) for bucket in sorted(latest)]


def extract_period_deltas(
    snapshots: Iterable[PnLSnapshot],
    granularity: Granularity,
) -> list[PeriodPoint]:
    """Convert cumulative snapshots to per-period P&L deltas.

    Args:
        snapshots: Cumulative P&L observations for one trader (any order)
        granularity: Bucket size

    Returns:
        PeriodPoint list strictly ascending by period_end, first bucket dropped
    """
    buckets = last_per_bucket(snapshots, granularity)

    deltas: list[PeriodPoint] = []
    for (_, previous_pnl), (period_end, pnl) in zip(buckets, buckets[1:]):
        deltas.append(PeriodPoint(period_end=period_end, value=pnl - previous_pnl))
    return deltas


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
