"""
Analytics error taxonomy.

Client errors (bad input, bad window, not enough history) carry a 4xx status
hint and a message that is safe to show verbatim. Upstream failures carry a
5xx hint and a generic message; details go to the logs only.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for analytics failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AnalyticsError):
    """Raised for missing allocations, missing window, or invalid capital."""

    status_code = 400


class InvalidWindowSpecError(AnalyticsError):
    """Raised when a window token does not parse."""

    status_code = 400


class InsufficientDataError(AnalyticsError):
    """Raised when fewer periods exist than one window requires."""

    status_code = 400

    def __init__(self, required: int, available: int, granularity: Optional[str] = None):
        unit = f" {granularity}" if granularity else ""
        super().__init__(
            f"Not enough data: need {required}, have {available}{unit} periods"
        )
        self.required = required
        self.available = available
        self.granularity = granularity


class UpstreamDataError(AnalyticsError):
    """Raised when the snapshot store cannot be read."""

    status_code = 500

    def __init__(self, message: str = "Failed to load trader P&L data"):
        super().__init__(message)


class ComputationDeadlineExceededError(AnalyticsError):
    """Raised when a rolling computation runs past its deadline."""

    status_code = 503

    def __init__(self, completed_windows: int, total_windows: int):
        super().__init__(
            f"Rolling analysis timed out after {completed_windows} of {total_windows} windows"
        )
        self.completed_windows = completed_windows
        self.total_windows = total_windows
