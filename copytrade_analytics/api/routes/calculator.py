"""
Calculator API Routes

Endpoints:
----------
POST /api/v1/calculator/rolling - Rolling-window analysis of a weighted allocation
POST /api/v1/calculator - Trailing-window metrics for one or more lookbacks

Client errors (bad allocations, bad window, not enough history) return 400
with the message verbatim. Store failures return 500 with a generic
message. A computation that runs past its deadline returns 503.

Responses are rendered with pydantic's JSON serializer so that non-finite
floats (an overflowing CAGR) become null instead of failing the response.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status

from copytrade_analytics.analytics.exceptions import (
    AnalyticsError,
    ComputationDeadlineExceededError,
    UpstreamDataError,
)
from copytrade_analytics.api.dependencies import get_rolling_analysis_service
from copytrade_analytics.models.calculator import (
    RollingAnalysisRequest,
    RollingAnalysisResponse,
    TrailingMetricsRequest,
    TrailingMetricsResponse,
)
from copytrade_analytics.services.rolling_analysis_service import RollingAnalysisService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/calculator", tags=["calculator"])


def _to_http_exception(error: AnalyticsError, server_error_detail: str) -> HTTPException:
    if isinstance(error, UpstreamDataError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=server_error_detail,
        )
    if isinstance(error, ComputationDeadlineExceededError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=error.message,
        )
    return HTTPException(status_code=error.status_code, detail=error.message)


def _json_response(model: RollingAnalysisResponse | TrailingMetricsResponse) -> Response:
    return Response(content=model.model_dump_json(), media_type="application/json")


@router.post("/rolling", response_model=RollingAnalysisResponse)
async def calculate_rolling_metrics(
    request: RollingAnalysisRequest,
    service: RollingAnalysisService = Depends(get_rolling_analysis_service),
) -> Response:
    """
    Rolling-window analysis of a weighted allocation.

    Slides the window across the blended portfolio history and returns
    per-window metrics, distribution summaries for seven metrics, a
    per-trader comparison series and each trader's data range.

    Example Usage:
    --------------
    ```bash
    curl -X POST "http://localhost:8000/api/v1/calculator/rolling" \\
      -H "Content-Type: application/json" \\
      -d '{"allocations": [{"trader_address": "0xabc", "percentage": 100}], "window": "7d"}'
    ```
    """
    try:
        result = await service.compute_rolling_analysis(
            [allocation.to_allocation() for allocation in request.allocations],
            request.window,
            request.initial_capital,
        )
    except AnalyticsError as e:
        logger.warning(
            "rolling_calculator_request_failed",
            window=request.window,
            status_code=e.status_code,
            error=e.message,
        )
        raise _to_http_exception(e, "Failed to calculate rolling metrics") from e

    return _json_response(result)


@router.post("", response_model=TrailingMetricsResponse)
async def calculate_trailing_metrics(
    request: TrailingMetricsRequest,
    service: RollingAnalysisService = Depends(get_rolling_analysis_service),
) -> Response:
    """
    Trailing-window metrics for a weighted allocation.

    Returns one metrics bundle (max drawdown, CAGR, total P&L, Sharpe,
    Sortino, win rate, average win/loss, profit factor) per requested window.
    """
    try:
        result = await service.compute_trailing_metrics(
            [allocation.to_allocation() for allocation in request.allocations],
            request.windows,
            request.initial_capital,
        )
    except AnalyticsError as e:
        logger.warning(
            "trailing_calculator_request_failed",
            windows=request.windows,
            status_code=e.status_code,
            error=e.message,
        )
        raise _to_http_exception(e, "Failed to calculate portfolio metrics") from e

    return _json_response(result)
