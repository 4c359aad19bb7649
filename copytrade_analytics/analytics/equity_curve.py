"""
Equity curve construction.

Stored P&L deltas are dollar amounts against a notional reference book
(1,000,000 by default). The builder rescales them to the chosen initial
capital and accumulates additively: equity[i] = equity[i-1] + delta[i] * scale.
No compounding and no floor, so equity may go negative.
"""

from collections.abc import Sequence

from copytrade_analytics.analytics.base import EquityPoint, PeriodPoint

REFERENCE_BOOK_SIZE = 1_000_000.0


class EquityCurveBuilder:
    """Build additive equity curves from period deltas.

    Example:
        builder = EquityCurveBuilder()
        curve = builder.build(periods, initial_capital=100_000)
        values = [p.equity for p in curve]
    """

    __slots__ = ("_reference_book_size",)

    def __init__(self, reference_book_size: float = REFERENCE_BOOK_SIZE):
        """Initialize builder.

        Args:
            reference_book_size: Book size the stored deltas are denominated against
        """
        if reference_book_size <= 0:
            raise ValueError("reference_book_size must be positive")
        self._reference_book_size = reference_book_size

    @property
    def reference_book_size(self) -> float:
        """Notional book size behind the stored deltas."""
        return self._reference_book_size

    def scale_factor(self, initial_capital: float) -> float:
        """Multiplier applied to each stored delta."""
        return initial_capital / self._reference_book_size

    def build(
        self,
        periods: Sequence[PeriodPoint],
        initial_capital: float,
    ) -> list[EquityPoint]:
        """Build the equity curve.

        Args:
            periods: Period deltas in ascending order
            initial_capital: Starting equity (anchor at index 0)

        Returns:
            len(periods) + 1 equity points
        """
        scale = self.scale_factor(initial_capital)
        equity = initial_capital
        curve = [EquityPoint(index=0, equity=equity)]

        for index, period in enumerate(periods, start=1):
            equity = equity + period.value * scale
            curve.append(EquityPoint(index=index, equity=equity))

        return curve

    def build_values(
        self,
        periods: Sequence[PeriodPoint],
        initial_capital: float,
    ) -> list[float]:
        """Same as build() but returns bare equity values."""
        return [point.equity for point in self.build(periods, initial_capital)]
