"""
Trailing window portfolio metrics.

One metrics bundle over the most recent lookback span (e.g. the last 30
days) of blended daily deltas, as opposed to the rolling analysis that
slides a window across the whole history. Sharpe uses the rolling formula
with 252 periods per year; Sortino takes its downside deviation over the
losing days only. CAGR uses calendar years (days / 365) and is capped.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from copytrade_analytics.analytics.base import TRADING_DAYS_PER_YEAR, PeriodPoint
from copytrade_analytics.analytics.drawdown_calculator import DrawdownCalculator
from copytrade_analytics.analytics.equity_curve import EquityCurveBuilder
from copytrade_analytics.analytics.exceptions import InvalidWindowSpecError
from copytrade_analytics.analytics.return_calculator import ReturnCalculator
from copytrade_analytics.analytics.risk_calculator import RiskCalculator
from copytrade_analytics.analytics.window_parser import WINDOW_PATTERN

CAGR_CAP_PCT = 99_999.0
CALENDAR_DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class TrailingMetrics:
    """Metrics over one trailing lookback window.

    Attributes:
        window: Window token the metrics were computed for
        max_drawdown: Maximum drawdown percentage, reported as <= 0
        cagr: Annualized growth percentage (capped)
        total_pnl: Dollar P&L at the chosen initial capital
        total_return: Total return percentage
        sharpe_ratio: Annualized Sharpe ratio, None when undefined
        sortino_ratio: Annualized Sortino ratio, None when undefined
        win_rate: Percentage of positive days
        avg_win: Mean winning day in dollars
        avg_loss: Mean losing day in dollars (<= 0)
        profit_factor: Gross wins / gross losses, None without losses
        period_count: Number of daily deltas in the lookback
    """

    window: str
    max_drawdown: float
    cagr: float
    total_pnl: float
    total_return: float
    sharpe_ratio: Optional[float]
    sortino_ratio: Optional[float]
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: Optional[float]
    period_count: int


def lookback_start(token: str, now: datetime) -> datetime:
    """Start of the calendar lookback named by a window token.

    Months and years step back by calendar month/year, clamping the day to
    the target month's length.

    Raises:
        InvalidWindowSpecError: Token is malformed, zero, or reaches back
            further than datetime can represent
    """
    match = WINDOW_PATTERN.fullmatch(token or "")
    if match is None or int(match.group(1)) == 0:
        raise InvalidWindowSpecError(f"Invalid window size: {token!r}")

    try:
        return _step_back(now, int(match.group(1)), match.group(2))
    except (OverflowError, ValueError) as e:
        # Lookback reaches before the first representable datetime
        raise InvalidWindowSpecError(f"Invalid window size: {token!r}") from e


def _step_back(now: datetime, magnitude: int, unit: str) -> datetime:
    if unit == "h":
        return now - timedelta(hours=magnitude)
    if unit == "d":
        return now - timedelta(days=magnitude)

    months = magnitude if unit == "m" else magnitude * 12
    year, month_index = divmod(now.year * 12 + (now.month - 1) - months, 12)
    month = month_index + 1
    day = min(now.day, _days_in_month(year, month))
    return now.replace(year=year, month=month, day=day)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    first_next = datetime(year, month + 1, 1)
    return (first_next - timedelta(days=1)).day


class TrailingMetricsCalculator:
    """Compute one metrics bundle over a trailing window of daily deltas.

    Example:
        calculator = TrailingMetricsCalculator()
        metrics = calculator.calculate("30d", daily_deltas, initial_capital=100_000)
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

    def empty(self, window: str) -> TrailingMetrics:
        """Metrics for a lookback with no data."""
        return TrailingMetrics(
            window=window,
            max_drawdown=0.0,
            cagr=0.0,
            total_pnl=0.0,
            total_return=0.0,
            sharpe_ratio=None,
            sortino_ratio=None,
            win_rate=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            profit_factor=None,
            period_count=0,
        )

    def calculate(
        self,
        window: str,
        daily_deltas: Sequence[PeriodPoint],
        initial_capital: float,
    ) -> TrailingMetrics:
        """Calculate trailing metrics.

        Args:
            window: Window token, used as the result label
            daily_deltas: Blended daily deltas inside the lookback, ascending
            initial_capital: Starting equity

        Returns:
            TrailingMetrics (the empty bundle when there are no deltas)
        """
        if not daily_deltas:
            return self.empty(window)

        equity = self._equity.build_values(daily_deltas, initial_capital)
        final_equity = equity[-1]
        returns = self._returns.calculate_period_returns(equity)

        wins = [r for r in returns if r > 0]
        losses = [r for r in returns if r < 0]
        avg_win = sum(wins) / len(wins) * initial_capital / 100 if wins else 0.0
        avg_loss = sum(losses) / len(losses) * initial_capital / 100 if losses else 0.0
        gross_losses = abs(sum(losses))
        profit_factor = sum(wins) / gross_losses if gross_losses > 0 else None

        total_return = (final_equity / initial_capital - 1) * 100
        years = len(daily_deltas) / CALENDAR_DAYS_PER_YEAR
        cagr = self._returns.calculate_cagr(final_equity, initial_capital, years)
        if final_equity <= 0:
            cagr = total_return

        max_dd = self._drawdown.calculate_max_drawdown(equity).max_drawdown_pct

        return TrailingMetrics(
            window=window,
            max_drawdown=-max_dd if max_dd else 0.0,
            cagr=min(cagr, CAGR_CAP_PCT),
            total_pnl=final_equity - initial_capital,
            total_return=total_return,
            sharpe_ratio=self._risk.calculate_sharpe_ratio(returns, TRADING_DAYS_PER_YEAR),
            sortino_ratio=self._risk.calculate_sortino_ratio(
                returns, TRADING_DAYS_PER_YEAR, losses_only=True
            ),
            win_rate=self._returns.calculate_win_rate(returns),
            avg_win=avg_win,
            avg_loss=avg_loss,
            profit_factor=profit_factor,
            period_count=len(daily_deltas),
        )
