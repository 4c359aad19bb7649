"""
Window token parser.

Turns compact window tokens ("3h", "7d", "6m", "1y") into a WindowSpec.
Month and year tokens are expressed as day periods (30 and 365 days).
"""

import re

from copytrade_analytics.analytics.base import (
    HOURLY_PERIODS_PER_YEAR,
    TRADING_DAYS_PER_YEAR,
    Granularity,
    WindowSpec,
)
from copytrade_analytics.analytics.exceptions import InvalidWindowSpecError

WINDOW_PATTERN = re.compile(r"([0-9]+)([hdmy])")

# unit -> (days per unit, granularity, periods per year)
_UNITS: dict[str, tuple[int, Granularity, int]] = {
    "h": (1, Granularity.HOUR, HOURLY_PERIODS_PER_YEAR),
    "d": (1, Granularity.DAY, TRADING_DAYS_PER_YEAR),
    "m": (30, Granularity.DAY, TRADING_DAYS_PER_YEAR),
    "y": (365, Granularity.DAY, TRADING_DAYS_PER_YEAR),
}


def parse_window(token: str) -> WindowSpec:
    """Parse a window token.

    Args:
        token: Integer magnitude followed by h, d, m or y

    Returns:
        WindowSpec for the token

    Raises:
        InvalidWindowSpecError: Token is malformed or has a zero magnitude
    """
    match = WINDOW_PATTERN.fullmatch(token or "")
    if match is None:
        raise InvalidWindowSpecError(f"Invalid window size: {token!r}")

    magnitude = int(match.group(1))
    if magnitude == 0:
        raise InvalidWindowSpecError(f"Invalid window size: {token!r} (magnitude must be > 0)")

    multiplier, granularity, periods_per_year = _UNITS[match.group(2)]
    return WindowSpec(
        period_count=magnitude * multiplier,
        granularity=granularity,
        periods_per_year=periods_per_year,
        token=token,
    )
