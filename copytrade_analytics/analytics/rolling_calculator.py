"""
Rolling window metrics calculator.

Slides a fixed-size window across a period series and computes one metrics
bundle per window position from the matching slice of the equity curve:

    window ending at period i covers periods [i - n + 1, i]
    equity slice = equity[i - n + 1 .. i + 1]  (pre-window anchor + n points)

Total return and CAGR are measured against the global initial capital, not
the slice's first value. CAGR uses the window's nominal length in years
(period_count / periods_per_year). Undefined ratios are None.

The per-window work is O(n), so a full run is O(periods * period_count).
An optional monotonic deadline is checked between windows.
"""

import time
from collections.abc import Sequence
from typing import Optional

import structlog

from copytrade_analytics.analytics.base import (
    PeriodPoint,
    RollingWindowResult,
    WindowSpec,
    format_period,
)
from copytrade_analytics.analytics.drawdown_calculator import DrawdownCalculator
from copytrade_analytics.analytics.equity_curve import EquityCurveBuilder
from copytrade_analytics.analytics.exceptions import (
    ComputationDeadlineExceededError,
    InsufficientDataError,
)
from copytrade_analytics.analytics.return_calculator import ReturnCalculator
from copytrade_analytics.analytics.risk_calculator import RiskCalculator

logger = structlog.get_logger(__name__)

# Drawdowns at or below this percentage are too small to divide by.
MIN_DRAWDOWN_FOR_RATIO = 0.1


class RollingWindowCalculator:
    """Compute per-window metrics for one entity (portfolio or single trader).

    Example:
        calculator = RollingWindowCalculator()
        windows = calculator.calculate(periods, spec, initial_capital=100_000)
    """

    def __init__(
        self,
        equity_builder: Optional[EquityCurveBuilder] = None,
        drawdown_calculator: Optional[DrawdownCalculator] = None,
        risk_calculator: Optional[RiskCalculator] = None,
        return_calculator: Optional[ReturnCalculator] = None,
    ):
        self._equity = equity_builder or EquityCurveBuilder()
        self._drawdown = drawdown_calculator or DrawdownCalculator()
        self._risk = risk_calculator or RiskCalculator()
        self._returns = return_calculator or ReturnCalculator()

    def window_count(self, period_total: int, period_count: int) -> int:
        """Number of window positions for a series of ``period_total`` periods."""
        return max(period_total - period_count + 1, 0)

    def calculate(
        self,
        periods: Sequence[PeriodPoint],
        spec: WindowSpec,
        initial_capital: float,
        deadline: Optional[float] = None,
    ) -> list[RollingWindowResult]:
        """Calculate metrics for every window position.

        Args:
            periods: Period deltas ascending by period_end
            spec: Parsed window
            initial_capital: Starting equity and total-return baseline
            deadline: time.monotonic() value after which to abort

        Returns:
            One RollingWindowResult per window position

        Raises:
            InsufficientDataError: Fewer periods than spec.period_count
            ComputationDeadlineExceededError: Deadline passed mid-run
        """
        period_count = spec.period_count
        if len(periods) < period_count:
            raise InsufficientDataError(
                required=period_count,
                available=len(periods),
                granularity=spec.granularity.value,
            )

        equity = self._equity.build_values(periods, initial_capital)
        total_windows = self.window_count(len(periods), period_count)
        results: list[RollingWindowResult] = []

        for end in range(period_count - 1, len(periods)):
            if deadline is not None and time.monotonic() > deadline:
                logger.warning(
                    "rolling_window_deadline_exceeded",
                    completed_windows=len(results),
                    total_windows=total_windows,
                    window=spec.token,
                )
                raise ComputationDeadlineExceededError(len(results), total_windows)

            start = end - period_count + 1
            window_equity = equity[start : end + 2]
            results.append(
                self.calculate_window(
                    window_equity,
                    spec,
                    initial_capital,
                    start_date=format_period(periods[start].period_end, spec.granularity),
                    end_date=format_period(periods[end].period_end, spec.granularity),
                )
            )

        return results

    def calculate_window(
        self,
        window_equity: Sequence[float],
        spec: WindowSpec,
        initial_capital: float,
        start_date: str = "",
        end_date: str = "",
    ) -> RollingWindowResult:
        """Compute the metrics bundle for one equity slice.

        Args:
            window_equity: Pre-window anchor followed by one value per period
            spec: Parsed window (annualization and nominal duration)
            initial_capital: Baseline for total return and CAGR
            start_date: Label of the first period
            end_date: Label of the last period
        """
        final_equity = window_equity[-1]
        returns = self._returns.calculate_period_returns(window_equity)

        max_dd = self._drawdown.calculate_max_drawdown(window_equity).max_drawdown_pct
        cagr = self._returns.calculate_cagr(final_equity, initial_capital, spec.years)

        return RollingWindowResult(
            start_date=start_date,
            end_date=end_date,
            sharpe=self._risk.calculate_sharpe_ratio(returns, spec.periods_per_year),
            drawdown=-max_dd if max_dd else 0.0,
            return_pct=self._returns.calculate_total_return(final_equity, initial_capital),
            win_rate=self._returns.calculate_win_rate(returns),
            sortino=self._risk.calculate_sortino_ratio(returns, spec.periods_per_year),
            cagr=cagr,
            cagr_max_dd_ratio=cagr / max_dd if max_dd > MIN_DRAWDOWN_FOR_RATIO else None,
        )
