"""
Drawdown calculator with an O(n) running-peak algorithm.

Drawdown at each point is (peak - value) / peak * 100 against the running
peak, including the curve's first point. A non-positive peak contributes no
drawdown.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DrawdownResult:
    """Maximum drawdown of an equity curve.

    Attributes:
        max_drawdown_pct: Largest peak-to-value decline in percent (>= 0)
        peak_index: Index of the peak preceding the deepest point
        trough_index: Index of the deepest point
    """

    max_drawdown_pct: float
    peak_index: Optional[int] = None
    trough_index: Optional[int] = None


class DrawdownCalculator:
    """Calculate drawdown metrics in a single pass.

    Stateless calculator - all methods are pure functions.

    Example:
        calculator = DrawdownCalculator()
        result = calculator.calculate_max_drawdown([100.0, 110.0, 99.0, 120.0])
        result.max_drawdown_pct  # 10.0
    """

    __slots__ = ()

    def calculate_max_drawdown(self, equity: Sequence[float]) -> DrawdownResult:
        """Calculate maximum drawdown.

        Time: O(n), Space: O(1)

        Args:
            equity: Equity values in curve order

        Returns:
            DrawdownResult with the drawdown as a positive percentage
        """
        if not equity:
            return DrawdownResult(max_drawdown_pct=0.0)

        peak = equity[0]
        peak_index = 0
        max_dd = 0.0
        max_dd_peak: Optional[int] = None
        max_dd_trough: Optional[int] = None

        for index, value in enumerate(equity):
            if value > peak:
                peak = value
                peak_index = index
            drawdown = (peak - value) / peak * 100 if peak > 0 else 0.0
            if drawdown > max_dd:
                max_dd = drawdown
                max_dd_peak = peak_index
                max_dd_trough = index

        return DrawdownResult(
            max_drawdown_pct=max_dd,
            peak_index=max_dd_peak,
            trough_index=max_dd_trough,
        )
