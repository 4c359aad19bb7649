"""
Allocation blending.

Combines per-trader period deltas into one weighted portfolio series. Every
period present for any allocated trader appears in the output; traders with
no value in a period contribute zero to it. Weights are applied as given,
without renormalizing to 100%.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from copytrade_analytics.analytics.base import PeriodPoint


@dataclass(frozen=True)
class Allocation:
    """Weight of one trader in a portfolio.

    Attributes:
        trader_address: Trader wallet address
        percentage: Weight in percent (100 = full notional)
    """

    trader_address: str
    percentage: float

    @property
    def address_key(self) -> str:
        """Lower-cased address used to key the snapshot store."""
        return self.trader_address.lower()


def blend_allocations(
    allocations: Sequence[Allocation],
    series_by_trader: Mapping[str, Sequence[PeriodPoint]],
) -> list[PeriodPoint]:
    """Blend per-trader deltas into portfolio deltas.

    Args:
        allocations: Traders and their percentage weights
        series_by_trader: Period deltas keyed by lower-cased trader address

    Returns:
        Portfolio PeriodPoint list ascending by period_end
    """
    blended: dict[datetime, float] = {}

    for allocation in allocations:
        weight = allocation.percentage / 100
        for point in series_by_trader.get(allocation.address_key, ()):
            blended[point.period_end] = blended.get(point.period_end, 0.0) + point.value * weight

    return [PeriodPoint(period_end=ts, value=blended[ts]) for ts in sorted(blended)]
