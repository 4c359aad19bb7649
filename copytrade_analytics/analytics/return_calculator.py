"""
Return calculator.

Provides return calculation methods on bare equity values:
- Period percentage returns
- Total return against a fixed initial capital
- Win rate over period returns
- CAGR over a nominal duration in years
"""

from collections.abc import Sequence


class ReturnCalculator:
    """Calculate return metrics.

    Stateless calculator - all methods are pure functions.

    Example:
        calculator = ReturnCalculator()
        returns = calculator.calculate_period_returns([100.0, 101.0, 100.5])
        total = calculator.calculate_total_return(100.5, initial_capital=100.0)
        cagr = calculator.calculate_cagr(100.5, initial_capital=100.0, years=2 / 252)
    """

    __slots__ = ()

    def calculate_period_returns(self, equity: Sequence[float]) -> list[float]:
        """Convert equity values to percentage period returns.

        r[j] = (equity[j] / equity[j-1] - 1) * 100. A step starting from zero
        equity has no defined return and is skipped.

        Time: O(n), Space: O(n) for output
        """
        returns: list[float] = []
        for previous, current in zip(equity, equity[1:]):
            if previous == 0:
                continue
            returns.append((current / previous - 1) * 100)
        return returns

    def calculate_total_return(self, final_equity: float, initial_capital: float) -> float:
        """Total Return = (final - initial) / initial * 100."""
        if initial_capital == 0:
            return 0.0
        return (final_equity - initial_capital) / initial_capital * 100

    def calculate_win_rate(self, returns: Sequence[float]) -> float:
        """Percentage of strictly positive returns (0 for no returns).

        Zero returns count as neither wins nor losses but stay in the
        denominator.
        """
        if not returns:
            return 0.0
        wins = sum(1 for r in returns if r > 0)
        return wins / len(returns) * 100

    def calculate_cagr(
        self,
        final_equity: float,
        initial_capital: float,
        years: float,
    ) -> float:
        """Calculate compound annual growth rate as a percentage.

        CAGR = ((final / initial) ^ (1 / years) - 1) * 100

        Returns 0 unless final equity, initial capital and years are all
        positive.
        """
        if final_equity <= 0 or initial_capital <= 0 or years <= 0:
            return 0.0
        try:
            return ((final_equity / initial_capital) ** (1 / years) - 1) * 100
        except OverflowError:
            return float("inf")
