"""
Rolling Analysis Service

Orchestrates the portfolio analytics pipeline for one request:

    fetch per-trader deltas -> blend -> rolling windows -> distributions
                            -> per-trader series + trader timelines

and the trailing-window calculator (one metrics bundle per lookback).

All state is request-scoped. The only suspension points are the snapshot
store reads; the numerical work is synchronous. Store failures are logged
with context and surfaced as UpstreamDataError with a generic message.
"""

import math
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Optional, Protocol

import structlog

from copytrade_analytics.analytics.allocation_blender import Allocation, blend_allocations
from copytrade_analytics.analytics.base import (
    Granularity,
    PeriodPoint,
    PnLSnapshot,
    WindowSpec,
    format_period,
)
from copytrade_analytics.analytics.distribution import DistributionSummarizer
from copytrade_analytics.analytics.equity_curve import EquityCurveBuilder
from copytrade_analytics.analytics.exceptions import (
    InsufficientDataError,
    InvalidInputError,
    UpstreamDataError,
)
from copytrade_analytics.analytics.period_extractor import extract_period_deltas, to_utc
from copytrade_analytics.analytics.rolling_calculator import RollingWindowCalculator
from copytrade_analytics.analytics.trailing_metrics import (
    TrailingMetricsCalculator,
    lookback_start,
)
from copytrade_analytics.analytics.window_parser import parse_window
from copytrade_analytics.config import settings
from copytrade_analytics.models.calculator import (
    IndividualTraderSeriesSchema,
    MetricDistributionSchema,
    RollingAnalysisResponse,
    RollingWindowSchema,
    TraderTimelineSchema,
    TrailingMetricsResponse,
    TrailingMetricsSchema,
)
from copytrade_analytics.repositories.pnl_snapshot_repository import (
    TraderDataRange,
    TraderProfile,
)

logger = structlog.get_logger(__name__)

# Chart colors for traders without a stored color, indexed by allocation position
TRADER_PALETTE = (
    "#00D9FF",
    "#22C55E",
    "#A855F7",
    "#F59E0B",
    "#FF6B6B",
    "#EC4899",
    "#3B82F6",
    "#14B8A6",
)


class SnapshotStore(Protocol):
    """Read side of the P&L snapshot store."""

    async def get_snapshots(
        self,
        addresses: Sequence[str],
        since: Optional[datetime] = None,
    ) -> dict[str, list[PnLSnapshot]]:
        ...

    async def fetch_period_deltas(
        self,
        addresses: Sequence[str],
        granularity: Granularity,
        since: Optional[datetime] = None,
    ) -> dict[str, list[PeriodPoint]]:
        ...

    async def get_trader_profiles(self, addresses: Sequence[str]) -> dict[str, TraderProfile]:
        ...

    async def get_trader_timelines(self, addresses: Sequence[str]) -> list[TraderDataRange]:
        ...


def trader_color(profile: Optional[TraderProfile], index: int) -> str:
    """Stored trader color, else the palette color for the allocation position."""
    if profile is not None and profile.color:
        return profile.color
    return TRADER_PALETTE[index % len(TRADER_PALETTE)]


def unique_addresses(allocations: Sequence[Allocation]) -> list[str]:
    """Lower-cased addresses in first-occurrence order."""
    seen: dict[str, None] = {}
    for allocation in allocations:
        seen.setdefault(allocation.address_key, None)
    return list(seen)


class RollingAnalysisService:
    """
    Service for portfolio rolling-window and trailing-window analytics.

    Example:
        ```python
        service = RollingAnalysisService(PnLSnapshotRepository(session))
        result = await service.compute_rolling_analysis(allocations, "7d", 100_000)
        ```
    """

    def __init__(
        self,
        store: SnapshotStore,
        rolling_calculator: Optional[RollingWindowCalculator] = None,
        summarizer: Optional[DistributionSummarizer] = None,
        trailing_calculator: Optional[TrailingMetricsCalculator] = None,
        timeout_seconds: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize service.

        Args:
            store: Snapshot store (PnLSnapshotRepository in production)
            rolling_calculator: Rolling window calculator
            summarizer: Distribution summarizer
            trailing_calculator: Trailing metrics calculator
            timeout_seconds: Rolling computation deadline
                (defaults to settings.rolling_compute_timeout_seconds)
            clock: Returns "now" for trailing lookbacks (defaults to UTC now)
        """
        self._store = store
        equity_builder = EquityCurveBuilder(settings.reference_book_size)
        self._rolling = rolling_calculator or RollingWindowCalculator(equity_builder=equity_builder)
        self._summarizer = summarizer or DistributionSummarizer()
        self._trailing = trailing_calculator or TrailingMetricsCalculator(
            equity_builder=equity_builder
        )
        self._timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.rolling_compute_timeout_seconds
        )
        self._clock = clock or (lambda: datetime.now(UTC))

    async def compute_rolling_analysis(
        self,
        allocations: Sequence[Allocation],
        window_token: Optional[str],
        initial_capital: float = 100_000.0,
    ) -> RollingAnalysisResponse:
        """
        Run the rolling-window analysis for a weighted allocation.

        Args:
            allocations: Traders and percentage weights
            window_token: Window size token (e.g. "7d")
            initial_capital: Starting equity in dollars

        Returns:
            RollingAnalysisResponse

        Raises:
            InvalidInputError: No allocations, no window, or non-positive capital
            InvalidWindowSpecError: Window token does not parse
            InsufficientDataError: Fewer blended periods than one window needs
            UpstreamDataError: Snapshot store failure
            ComputationDeadlineExceededError: Computation ran past the deadline
        """
        if not allocations:
            raise InvalidInputError("At least one allocation is required")
        if not window_token:
            raise InvalidInputError("Window size is required")
        spec = parse_window(window_token)
        _validate_capital(initial_capital)

        addresses = unique_addresses(allocations)
        log = logger.bind(window=spec.token, trader_count=len(addresses))
        started = time.monotonic()

        try:
            series_by_trader = await self._store.fetch_period_deltas(addresses, spec.granularity)
            profiles = await self._store.get_trader_profiles(addresses)
            data_ranges = await self._store.get_trader_timelines(addresses)
        except Exception as e:
            log.error(
                "rolling_analysis_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamDataError() from e

        portfolio = blend_allocations(allocations, series_by_trader)
        if len(portfolio) < spec.period_count:
            log.info(
                "rolling_analysis_insufficient_data",
                required=spec.period_count,
                available=len(portfolio),
            )
            raise InsufficientDataError(
                required=spec.period_count,
                available=len(portfolio),
                granularity=spec.granularity.value,
            )

        deadline = started + self._timeout if self._timeout else None
        windows = self._rolling.calculate(portfolio, spec, initial_capital, deadline=deadline)
        distributions = self._summarizer.summarize_all(windows)

        trader_series = self._build_trader_series(
            addresses, series_by_trader, profiles, spec, initial_capital, deadline
        )
        timelines = self._build_timelines(allocations, addresses, profiles, data_ranges, spec)

        log.info(
            "rolling_analysis_completed",
            period_count=len(portfolio),
            sample_count=len(windows),
            trader_series=len(trader_series),
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        return RollingAnalysisResponse(
            window=window_token,
            sample_count=len(windows),
            **{
                metric: MetricDistributionSchema.model_validate(distribution)
                for metric, distribution in distributions.items()
            },
            time_series=[RollingWindowSchema.model_validate(w) for w in windows],
            trader_timelines=timelines,
            individual_trader_series=trader_series,
        )

    def _build_trader_series(
        self,
        addresses: Sequence[str],
        series_by_trader: dict[str, list[PeriodPoint]],
        profiles: dict[str, TraderProfile],
        spec: WindowSpec,
        initial_capital: float,
        deadline: Optional[float],
    ) -> list[IndividualTraderSeriesSchema]:
        """Rolling windows per trader at 100% weight; short histories are skipped."""
        trader_series: list[IndividualTraderSeriesSchema] = []

        for index, address in enumerate(addresses):
            periods = series_by_trader.get(address, [])
            if len(periods) < spec.period_count:
                logger.debug(
                    "trader_series_skipped",
                    trader_address=address,
                    required=spec.period_count,
                    available=len(periods),
                )
                continue

            profile = profiles.get(address)
            windows = self._rolling.calculate(periods, spec, initial_capital, deadline=deadline)
            trader_series.append(
                IndividualTraderSeriesSchema(
                    trader_address=address,
                    trader_name=profile.alias if profile else address,
                    color=trader_color(profile, index),
                    data=[RollingWindowSchema.model_validate(w) for w in windows],
                )
            )

        return trader_series

    @staticmethod
    def _build_timelines(
        allocations: Sequence[Allocation],
        addresses: Sequence[str],
        profiles: dict[str, TraderProfile],
        data_ranges: Sequence[TraderDataRange],
        spec: WindowSpec,
    ) -> list[TraderTimelineSchema]:
        """Data availability per trader, in store order (earliest first)."""
        positions = {address: index for index, address in enumerate(addresses)}
        percentages: dict[str, float] = {}
        for allocation in allocations:
            key = allocation.address_key
            percentages[key] = percentages.get(key, 0.0) + allocation.percentage

        timelines = []
        for data_range in data_ranges:
            address = data_range.address.lower()
            profile = profiles.get(address)
            timelines.append(
                TraderTimelineSchema(
                    trader_address=address,
                    trader_name=profile.alias if profile else address,
                    color=trader_color(profile, positions.get(address, 0)),
                    first_data_date=format_period(
                        to_utc(data_range.first_snapshot), spec.granularity
                    ),
                    last_data_date=format_period(
                        to_utc(data_range.last_snapshot), spec.granularity
                    ),
                    percentage=percentages.get(address, 0.0),
                )
            )
        return timelines

    async def compute_trailing_metrics(
        self,
        allocations: Sequence[Allocation],
        windows: Sequence[str],
        initial_capital: float = 100_000.0,
    ) -> TrailingMetricsResponse:
        """
        Compute one metrics bundle per trailing lookback window.

        Snapshots are loaded once from the earliest lookback start; each
        window then uses only the snapshots inside its own lookback.

        Args:
            allocations: Traders and percentage weights
            windows: Window tokens (e.g. ["7d", "30d", "1y"])
            initial_capital: Starting equity in dollars

        Returns:
            TrailingMetricsResponse with metrics in request order

        Raises:
            InvalidInputError: No allocations, no windows, or non-positive capital
            InvalidWindowSpecError: A window token does not parse
            UpstreamDataError: Snapshot store failure
        """
        if not allocations:
            raise InvalidInputError("At least one allocation is required")
        if not windows:
            raise InvalidInputError("At least one window is required")
        _validate_capital(initial_capital)

        now = to_utc(self._clock())
        starts = [lookback_start(window, now) for window in windows]
        addresses = unique_addresses(allocations)

        try:
            snapshots = await self._store.get_snapshots(addresses, since=min(starts))
        except Exception as e:
            logger.error(
                "trailing_metrics_fetch_failed",
                trader_count=len(addresses),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamDataError() from e

        metrics = []
        for window, start in zip(windows, starts):
            daily_by_trader = {
                address: extract_period_deltas(
                    [s for s in trader_snapshots if to_utc(s.time) >= start],
                    Granularity.DAY,
                )
                for address, trader_snapshots in snapshots.items()
            }
            daily = blend_allocations(allocations, daily_by_trader)
            result = self._trailing.calculate(window, daily, initial_capital)
            metrics.append(TrailingMetricsSchema.model_validate(result))

        logger.info(
            "trailing_metrics_completed",
            trader_count=len(addresses),
            windows=list(windows),
        )
        return TrailingMetricsResponse(metrics=metrics)


def _validate_capital(initial_capital: float) -> None:
    if not math.isfinite(initial_capital) or initial_capital <= 0:
        raise InvalidInputError("Initial capital must be a positive number")
