"""
Risk calculator for annualized Sharpe and Sortino ratios.

Returns are percentage period returns. Both ratios use population moments
(divide by N) and are annualized by sqrt(periods_per_year). A zero
denominator means the ratio is undefined and is reported as None rather
than raised or clamped.
"""

import math
from collections.abc import Sequence
from typing import Optional


class RiskCalculator:
    """Calculate risk-adjusted return metrics using O(n) algorithms.

    Stateless calculator - all methods are pure functions.

    Example:
        calculator = RiskCalculator()
        sharpe = calculator.calculate_sharpe_ratio(returns, periods_per_year=252)
        sortino = calculator.calculate_sortino_ratio(returns, periods_per_year=252)
    """

    __slots__ = ()

    @staticmethod
    def mean(values: Sequence[float]) -> float:
        """Arithmetic mean accumulated left to right (0 for no values)."""
        if not values:
            return 0.0
        return sum(values) / len(values)

    def population_std_dev(self, values: Sequence[float]) -> float:
        """Standard deviation dividing by N."""
        if not values:
            return 0.0
        mean_value = self.mean(values)
        variance = sum((v - mean_value) ** 2 for v in values) / len(values)
        return math.sqrt(variance)

    @staticmethod
    def downside_deviation(values: Sequence[float], losses_only: bool = False) -> float:
        """sqrt(mean(min(r, 0)^2)) over all returns.

        Gains count as zero but stay in the denominator, unless losses_only
        is set, in which case the mean runs over the negative returns alone.
        """
        if losses_only:
            values = [v for v in values if v < 0]
        if not values:
            return 0.0
        return math.sqrt(sum(min(v, 0.0) ** 2 for v in values) / len(values))

    def calculate_sharpe_ratio(
        self,
        returns: Sequence[float],
        periods_per_year: float,
    ) -> Optional[float]:
        """Calculate annualized Sharpe ratio.

        Sharpe = mean / pstdev * sqrt(periods_per_year)

        Args:
            returns: Period percentage returns
            periods_per_year: Annualization factor

        Returns:
            Sharpe ratio, or None when the standard deviation is zero
        """
        std_dev = self.population_std_dev(returns)
        if std_dev == 0:
            return None
        return self.mean(returns) / std_dev * math.sqrt(periods_per_year)

    def calculate_sortino_ratio(
        self,
        returns: Sequence[float],
        periods_per_year: float,
        losses_only: bool = False,
    ) -> Optional[float]:
        """Calculate annualized Sortino ratio.

        Sortino = mean / downside_deviation * sqrt(periods_per_year)

        Args:
            returns: Period percentage returns
            periods_per_year: Annualization factor
            losses_only: Measure downside deviation over losing periods only

        Returns:
            Sortino ratio, or None when there is no downside deviation
        """
        downside = self.downside_deviation(returns, losses_only=losses_only)
        if downside == 0:
            return None
        return self.mean(returns) / downside * math.sqrt(periods_per_year)
