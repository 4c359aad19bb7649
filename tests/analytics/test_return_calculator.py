"""Unit tests for ReturnCalculator."""

import pytest

from copytrade_analytics.analytics.return_calculator import ReturnCalculator


@pytest.fixture
def calculator():
    """Create ReturnCalculator instance."""
    return ReturnCalculator()


class TestCalculatePeriodReturns:
    """Tests for calculate_period_returns method."""

    def test_percentage_returns(self, calculator):
        returns = calculator.calculate_period_returns([100.0, 110.0, 99.0])

        assert returns == pytest.approx([10.0, -10.0])

    def test_step_from_zero_skipped(self, calculator):
        assert calculator.calculate_period_returns([0.0, 10.0, 20.0]) == pytest.approx([100.0])

    def test_too_short(self, calculator):
        assert calculator.calculate_period_returns([100.0]) == []
        assert calculator.calculate_period_returns([]) == []


class TestCalculateTotalReturn:
    """Tests for calculate_total_return method."""

    def test_against_initial_capital(self, calculator):
        assert calculator.calculate_total_return(110_000.0, 100_000.0) == pytest.approx(10.0)
        assert calculator.calculate_total_return(-50_000.0, 100_000.0) == pytest.approx(-150.0)


class TestCalculateWinRate:
    """Tests for calculate_win_rate method."""

    def test_zero_is_neither_win_nor_loss(self, calculator):
        assert calculator.calculate_win_rate([1.0, 0.0, -1.0, 2.0]) == pytest.approx(50.0)

    def test_empty(self, calculator):
        assert calculator.calculate_win_rate([]) == 0.0


class TestCalculateCagr:
    """Tests for calculate_cagr method."""

    def test_two_years(self, calculator):
        assert calculator.calculate_cagr(121.0, 100.0, years=2) == pytest.approx(10.0)

    def test_short_window_annualizes(self, calculator):
        cagr = calculator.calculate_cagr(100_250.0, 100_000.0, years=7 / 252)

        assert cagr == pytest.approx((1.0025 ** (252 / 7) - 1) * 100)

    @pytest.mark.parametrize(
        ("final", "initial", "years"),
        [(0.0, 100.0, 1.0), (-5.0, 100.0, 1.0), (100.0, 0.0, 1.0), (110.0, 100.0, 0.0)],
    )
    def test_not_computable_is_zero(self, calculator, final, initial, years):
        assert calculator.calculate_cagr(final, initial, years) == 0.0

    def test_overflow_is_infinite(self, calculator):
        assert calculator.calculate_cagr(1e6, 1.0, years=1e-3) == float("inf")
