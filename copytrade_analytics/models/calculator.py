"""
Calculator API Models

Purpose:
--------
Pydantic request/response models for the portfolio calculator endpoints.

Request Models:
---------------
- AllocationInput: One trader and its percentage weight
- RollingAnalysisRequest: Rolling-window analysis request
- TrailingMetricsRequest: Trailing-window metrics request

Response Models:
----------------
- MetricDistributionSchema: Distribution of one metric across windows
- RollingWindowSchema: Metrics bundle for one rolling window
- TraderTimelineSchema: First/last data date for one trader
- IndividualTraderSeriesSchema: Rolling windows for one trader
- RollingAnalysisResponse: Complete rolling analysis
- TrailingMetricsSchema / TrailingMetricsResponse: Trailing-window metrics

Request models accept missing fields so that validation failures surface as
400 responses with the service's own messages instead of 422s.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from copytrade_analytics.analytics.allocation_blender import Allocation
from copytrade_analytics.config import settings


class AllocationInput(BaseModel):
    """Weight of one trader in the portfolio."""

    trader_address: str = Field(..., description="Trader wallet address (any case)")
    percentage: float = Field(..., description="Weight in percent (100 = full notional)")

    def to_allocation(self) -> Allocation:
        return Allocation(trader_address=self.trader_address, percentage=self.percentage)


class RollingAnalysisRequest(BaseModel):
    """Request for a rolling-window portfolio analysis."""

    allocations: list[AllocationInput] = Field(
        default_factory=list,
        description="Traders and weights; weights are not renormalized",
    )
    window: Optional[str] = Field(
        default=None,
        description="Window token: <n>h, <n>d, <n>m or <n>y (e.g. '7d')",
    )
    initial_capital: float = Field(
        default_factory=lambda: settings.default_initial_capital,
        description="Starting equity in dollars",
    )


class TrailingMetricsRequest(BaseModel):
    """Request for trailing-window metrics over one or more lookbacks."""

    allocations: list[AllocationInput] = Field(default_factory=list)
    windows: list[str] = Field(
        default_factory=list,
        description="Window tokens, one metrics bundle each (e.g. ['7d', '30d', '1y'])",
    )
    initial_capital: float = Field(default_factory=lambda: settings.default_initial_capital)


class MetricDistributionSchema(BaseModel):
    """Distribution of one metric across all rolling windows."""

    model_config = ConfigDict(from_attributes=True)

    best: float
    worst: float
    average: float
    median: float
    std_dev: float
    percentile_10: float
    percentile_25: float
    percentile_75: float
    percentile_90: float
    best_period_start: str
    best_period_end: str
    worst_period_start: str
    worst_period_end: str


class RollingWindowSchema(BaseModel):
    """Metrics bundle for one rolling window position."""

    model_config = ConfigDict(from_attributes=True)

    start_date: str
    end_date: str
    sharpe: Optional[float]
    drawdown: float
    return_pct: float
    win_rate: float
    sortino: Optional[float]
    cagr: float
    cagr_max_dd_ratio: Optional[float]


class TraderTimelineSchema(BaseModel):
    """Data availability for one allocated trader."""

    model_config = ConfigDict(from_attributes=True)

    trader_address: str
    trader_name: str
    color: str
    first_data_date: str
    last_data_date: str
    percentage: float


class IndividualTraderSeriesSchema(BaseModel):
    """Rolling windows for one trader at 100% weight."""

    model_config = ConfigDict(from_attributes=True)

    trader_address: str
    trader_name: str
    color: str
    data: list[RollingWindowSchema]


class RollingAnalysisResponse(BaseModel):
    """Complete rolling-window analysis of a portfolio."""

    model_config = ConfigDict(from_attributes=True)

    window: str
    sample_count: int = Field(..., description="Number of rolling windows")
    sharpe_ratio: MetricDistributionSchema
    max_drawdown: MetricDistributionSchema
    total_return: MetricDistributionSchema
    win_rate: MetricDistributionSchema
    sortino_ratio: MetricDistributionSchema
    cagr: MetricDistributionSchema
    cagr_max_dd_ratio: MetricDistributionSchema
    time_series: list[RollingWindowSchema]
    trader_timelines: list[TraderTimelineSchema]
    individual_trader_series: list[IndividualTraderSeriesSchema]


class TrailingMetricsSchema(BaseModel):
    """Metrics over one trailing lookback window."""

    model_config = ConfigDict(from_attributes=True)

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


class TrailingMetricsResponse(BaseModel):
    """Trailing metrics, one entry per requested window in request order."""

    model_config = ConfigDict(from_attributes=True)

    metrics: list[TrailingMetricsSchema]
