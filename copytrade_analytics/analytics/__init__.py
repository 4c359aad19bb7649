"""
Portfolio analytics engine.

Pure, synchronous computation over per-trader P&L history. Nothing in this
package touches the database or the network.

Modules:
    base: Value types (WindowSpec, PnLSnapshot, PeriodPoint, EquityPoint, results)
    exceptions: Error taxonomy (client errors vs upstream failures)
    window_parser: "7d" / "3h" / "6m" / "1y" tokens -> WindowSpec
    period_extractor: Cumulative snapshots -> per-period deltas
    allocation_blender: Per-trader deltas -> weighted portfolio deltas
    equity_curve: Period deltas -> additive equity curve
    drawdown_calculator: O(n) max drawdown
    risk_calculator: Sharpe and Sortino ratios
    return_calculator: Period returns, total return, win rate, CAGR
    rolling_calculator: Per-window metrics bundles
    distribution: Distribution summaries across windows
    trailing_metrics: Single-bundle metrics over a trailing lookback

Example:
    from copytrade_analytics.analytics import (
        DistributionSummarizer,
        RollingWindowCalculator,
        parse_window,
    )

    spec = parse_window("7d")
    windows = RollingWindowCalculator().calculate(periods, spec, initial_capital=100_000)
    summary = DistributionSummarizer().summarize_all(windows)
"""

from copytrade_analytics.analytics.allocation_blender import Allocation, blend_allocations
from copytrade_analytics.analytics.base import (
    EquityPoint,
    Granularity,
    MetricDistribution,
    PeriodPoint,
    PnLSnapshot,
    RollingWindowResult,
    WindowSpec,
    format_period,
)
from copytrade_analytics.analytics.distribution import DistributionSummarizer
from copytrade_analytics.analytics.drawdown_calculator import DrawdownCalculator, DrawdownResult
from copytrade_analytics.analytics.equity_curve import EquityCurveBuilder
from copytrade_analytics.analytics.exceptions import (
    AnalyticsError,
    ComputationDeadlineExceededError,
    InsufficientDataError,
    InvalidInputError,
    InvalidWindowSpecError,
    UpstreamDataError,
)
from copytrade_analytics.analytics.period_extractor import extract_period_deltas
from copytrade_analytics.analytics.return_calculator import ReturnCalculator
from copytrade_analytics.analytics.risk_calculator import RiskCalculator
from copytrade_analytics.analytics.rolling_calculator import RollingWindowCalculator
from copytrade_analytics.analytics.trailing_metrics import (
    TrailingMetrics,
    TrailingMetricsCalculator,
)
from copytrade_analytics.analytics.window_parser import parse_window

__all__ = [
    # Calculators
    "RollingWindowCalculator",
    "DistributionSummarizer",
    "TrailingMetricsCalculator",
    "EquityCurveBuilder",
    "DrawdownCalculator",
    "RiskCalculator",
    "ReturnCalculator",
    # Functions
    "parse_window",
    "extract_period_deltas",
    "blend_allocations",
    "format_period",
    # Data models
    "Allocation",
    "DrawdownResult",
    "EquityPoint",
    "Granularity",
    "MetricDistribution",
    "PeriodPoint",
    "PnLSnapshot",
    "RollingWindowResult",
    "TrailingMetrics",
    "WindowSpec",
    # Errors
    "AnalyticsError",
    "ComputationDeadlineExceededError",
    "InsufficientDataError",
    "InvalidInputError",
    "InvalidWindowSpecError",
    "UpstreamDataError",
]
