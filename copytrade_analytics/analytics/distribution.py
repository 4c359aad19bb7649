"""
Distribution summarizer for rolling-window metrics.

Summarizes one metric's non-null values across all windows: extremes,
mean, median, population standard deviation and floor-indexed percentiles
(sorted[floor(p * (n - 1))], no interpolation). Best/worst windows are the
first windows, in series order, whose value equals the extreme exactly.
"""

import math
from collections.abc import Callable, Sequence
from typing import Optional

from copytrade_analytics.analytics.base import MetricDistribution, RollingWindowResult

MetricGetter = Callable[[RollingWindowResult], Optional[float]]

PERCENTILES = (0.10, 0.25, 0.75, 0.90)

# Metric name -> accessor on RollingWindowResult
METRIC_GETTERS: dict[str, MetricGetter] = {
    "sharpe_ratio": lambda w: w.sharpe,
    "max_drawdown": lambda w: w.drawdown,
    "total_return": lambda w: w.return_pct,
    "win_rate": lambda w: w.win_rate,
    "sortino_ratio": lambda w: w.sortino,
    "cagr": lambda w: w.cagr,
    "cagr_max_dd_ratio": lambda w: w.cagr_max_dd_ratio,
}

EMPTY_DISTRIBUTION = MetricDistribution(
    best=0.0,
    worst=0.0,
    average=0.0,
    median=0.0,
    std_dev=0.0,
    percentile_10=0.0,
    percentile_25=0.0,
    percentile_75=0.0,
    percentile_90=0.0,
    best_period_start="",
    best_period_end="",
    worst_period_start="",
    worst_period_end="",
)


def floor_percentile(sorted_values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile via floor on an ascending sequence."""
    return sorted_values[math.floor(p * (len(sorted_values) - 1))]


def median(sorted_values: Sequence[float]) -> float:
    """Median of an ascending, non-empty sequence."""
    n = len(sorted_values)
    mid = n // 2
    if n % 2 == 0:
        return (sorted_values[mid - 1] + sorted_values[mid]) / 2
    return sorted_values[mid]


class DistributionSummarizer:
    """Summarize metric values across rolling windows.

    Example:
        summarizer = DistributionSummarizer()
        sharpe = summarizer.summarize_metric(windows, "sharpe_ratio")
        all_metrics = summarizer.summarize_all(windows)
    """

    __slots__ = ()

    def summarize(
        self,
        values: Sequence[float],
        windows: Sequence[RollingWindowResult],
        getter: MetricGetter,
    ) -> MetricDistribution:
        """Summarize values and locate the best/worst windows.

        Args:
            values: Non-null metric values
            windows: All window results, in series order
            getter: Accessor returning the metric (or None) for a window

        Returns:
            MetricDistribution, or the all-zero sentinel for no values
        """
        if not values:
            return EMPTY_DISTRIBUTION

        sorted_values = sorted(values)
        n = len(values)
        best = max(values)
        worst = min(values)
        average = sum(values) / n
        std_dev = math.sqrt(sum((v - average) ** 2 for v in values) / n)

        best_window: Optional[RollingWindowResult] = None
        worst_window: Optional[RollingWindowResult] = None
        for window in windows:
            value = getter(window)
            if value is None:
                continue
            if best_window is None and value == best:
                best_window = window
            if worst_window is None and value == worst:
                worst_window = window

        p10, p25, p75, p90 = (floor_percentile(sorted_values, p) for p in PERCENTILES)

        return MetricDistribution(
            best=best,
            worst=worst,
            average=average,
            median=median(sorted_values),
            std_dev=std_dev,
            percentile_10=p10,
            percentile_25=p25,
            percentile_75=p75,
            percentile_90=p90,
            best_period_start=best_window.start_date if best_window else "",
            best_period_end=best_window.end_date if best_window else "",
            worst_period_start=worst_window.start_date if worst_window else "",
            worst_period_end=worst_window.end_date if worst_window else "",
        )

    def summarize_metric(
        self,
        windows: Sequence[RollingWindowResult],
        metric: str,
    ) -> MetricDistribution:
        """Summarize one named metric (see METRIC_GETTERS)."""
        getter = METRIC_GETTERS[metric]
        values = [v for v in (getter(w) for w in windows) if v is not None]
        return self.summarize(values, windows, getter)

    def summarize_all(
        self,
        windows: Sequence[RollingWindowResult],
    ) -> dict[str, MetricDistribution]:
        """Summarize every metric, keyed by metric name."""
        return {metric: self.summarize_metric(windows, metric) for metric in METRIC_GETTERS}
