"""Unit tests for DrawdownCalculator."""

import pytest

from copytrade_analytics.analytics.drawdown_calculator import DrawdownCalculator


class TestCalculateMaxDrawdown:
    """Tests for calculate_max_drawdown method."""

    @pytest.fixture
    def calculator(self):
        """Create DrawdownCalculator instance."""
        return DrawdownCalculator()

    def test_empty_equity_curve(self, calculator):
        """Test with empty equity curve returns zero drawdown."""
        result = calculator.calculate_max_drawdown([])

        assert result.max_drawdown_pct == 0.0
        assert result.peak_index is None

    def test_single_point(self, calculator):
        assert calculator.calculate_max_drawdown([100_000.0]).max_drawdown_pct == 0.0

    def test_no_drawdown(self, calculator):
        """Test steadily increasing equity has zero drawdown."""
        result = calculator.calculate_max_drawdown([100.0, 101.0, 102.0, 103.0])

        assert result.max_drawdown_pct == 0.0
        assert result.trough_index is None

    def test_simple_drawdown(self, calculator):
        result = calculator.calculate_max_drawdown([100.0, 110.0, 99.0, 120.0])

        assert result.max_drawdown_pct == pytest.approx(10.0)
        assert result.peak_index == 1
        assert result.trough_index == 2

    def test_multiple_drawdowns(self, calculator):
        """Test with multiple drawdowns returns maximum."""
        curve = [100_000.0, 95_000.0, 110_000.0, 88_000.0, 115_000.0, 103_500.0]

        result = calculator.calculate_max_drawdown(curve)

        assert result.max_drawdown_pct == pytest.approx(20.0)
        assert result.peak_index == 2
        assert result.trough_index == 3

    def test_first_point_counts_as_peak(self, calculator):
        result = calculator.calculate_max_drawdown([100.0, 90.0, 95.0])

        assert result.max_drawdown_pct == pytest.approx(10.0)
        assert result.peak_index == 0

    def test_non_positive_peak_contributes_nothing(self, calculator):
        assert calculator.calculate_max_drawdown([-100.0, -50.0, -200.0]).max_drawdown_pct == 0.0
        assert calculator.calculate_max_drawdown([0.0, -10.0]).max_drawdown_pct == 0.0

    def test_large_curve_single_pass(self, calculator):
        curve = [100.0 + (i % 10) for i in range(100_000)]

        result = calculator.calculate_max_drawdown(curve)

        assert result.max_drawdown_pct == pytest.approx(9 / 109 * 100)
