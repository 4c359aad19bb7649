"""
Base models for portfolio analytics.

Provides the immutable value types that flow through the analytics
pipeline: snapshots in, period deltas, equity points, and per-window
results out.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Granularity(str, Enum):
    """Period size used to bucket snapshots."""

    HOUR = "hour"
    DAY = "day"


HOURLY_PERIODS_PER_YEAR = 24 * 365
TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True)
class WindowSpec:
    """Parsed rolling window.

    Attributes:
        period_count: Number of periods spanned by one window
        granularity: Period size (hour or day)
        periods_per_year: Annualization factor for ratio metrics
        token: Original window token (e.g. "7d")
    """

    period_count: int
    granularity: Granularity
    periods_per_year: int
    token: str = ""

    @property
    def years(self) -> float:
        """Nominal window duration in years."""
        return self.period_count / self.periods_per_year


@dataclass(frozen=True)
class PnLSnapshot:
    """Cumulative P&L observation for one trader.

    Attributes:
        time: Observation time (UTC)
        cumulative_pnl: Total (realized + unrealized) P&L at that time
    """

    time: datetime
    cumulative_pnl: float


@dataclass(frozen=True)
class PeriodPoint:
    """Absolute dollar P&L change over one period.

    Attributes:
        period_end: Bucket label (UTC bucket start)
        value: P&L delta against the previous present bucket
    """

    period_end: datetime
    value: float


@dataclass(frozen=True)
class EquityPoint:
    """Single point on an equity curve.

    Attributes:
        index: Position in the curve (0 is the initial-capital anchor)
        equity: Portfolio value after applying ``index`` period deltas
    """

    index: int
    equity: float


@dataclass(frozen=True)
class RollingWindowResult:
    """Metrics bundle for one rolling window position.

    Attributes:
        start_date: Formatted period_end of the first period in the window
        end_date: Formatted period_end of the last period in the window
        sharpe: Annualized Sharpe ratio, None when volatility is zero
        drawdown: Maximum drawdown percentage, reported as <= 0
        return_pct: Total return against the initial capital
        win_rate: Percentage of periods with a strictly positive return
        sortino: Annualized Sortino ratio, None when downside deviation is zero
        cagr: Compound annual growth rate percentage over the nominal window
        cagr_max_dd_ratio: CAGR / |drawdown|, None when drawdown <= 0.1%
    """

    start_date: str
    end_date: str
    sharpe: Optional[float]
    drawdown: float
    return_pct: float
    win_rate: float
    sortino: Optional[float]
    cagr: float
    cagr_max_dd_ratio: Optional[float]


@dataclass(frozen=True)
class MetricDistribution:
    """Distribution of one metric across all rolling windows."""

    best: float
    worst: float
    average: float
    median: float
    std_dev: float
    percentile_10: float
    percentile_25: float
    percentile_75: float
    percentile_90: float
    best_period_start: str
    best_period_end: str
    worst_period_start: str
    worst_period_end: str


def format_period(value: datetime, granularity: Granularity) -> str:
    """Format a period label at the window's granularity."""
    if granularity == Granularity.HOUR:
        return value.strftime("%Y-%m-%d %H:%M")
    return value.strftime("%Y-%m-%d")
