"""Unit tests for RiskCalculator."""

import math

import pytest

from copytrade_analytics.analytics.risk_calculator import RiskCalculator


@pytest.fixture
def calculator():
    """Create RiskCalculator instance."""
    return RiskCalculator()


class TestMoments:
    """Tests for mean, standard deviation and downside deviation."""

    def test_population_std_dev(self, calculator):
        assert calculator.population_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_downside_deviation_counts_gains_as_zero(self, calculator):
        """Gains stay in the denominator."""
        assert calculator.downside_deviation([2.0, -1.0, 2.0, -1.0]) == pytest.approx(
            math.sqrt(0.5)
        )

    def test_downside_deviation_losses_only(self, calculator):
        deviation = calculator.downside_deviation([2.0, -1.0, 2.0, -3.0], losses_only=True)

        assert deviation == pytest.approx(math.sqrt(5.0))
        assert calculator.downside_deviation([1.0, 2.0], losses_only=True) == 0.0

    def test_empty(self, calculator):
        assert calculator.mean([]) == 0.0
        assert calculator.population_std_dev([]) == 0.0
        assert calculator.downside_deviation([]) == 0.0


class TestCalculateSharpeRatio:
    """Tests for calculate_sharpe_ratio method."""

    def test_annualized(self, calculator):
        sharpe = calculator.calculate_sharpe_ratio([2.0, -1.0, 2.0, -1.0], periods_per_year=252)

        assert sharpe == pytest.approx(0.5 / 1.5 * math.sqrt(252))

    def test_hourly_annualization(self, calculator):
        daily = calculator.calculate_sharpe_ratio([2.0, -1.0], periods_per_year=252)
        hourly = calculator.calculate_sharpe_ratio([2.0, -1.0], periods_per_year=8760)

        assert hourly / daily == pytest.approx(math.sqrt(8760 / 252))

    @pytest.mark.parametrize("returns", [[], [1.0], [0.5, 0.5, 0.5], [0.0, 0.0]])
    def test_zero_volatility_is_none(self, calculator, returns):
        assert calculator.calculate_sharpe_ratio(returns, periods_per_year=252) is None


class TestCalculateSortinoRatio:
    """Tests for calculate_sortino_ratio method."""

    def test_annualized(self, calculator):
        sortino = calculator.calculate_sortino_ratio([2.0, -1.0, 2.0, -1.0], periods_per_year=252)

        assert sortino == pytest.approx(0.5 / math.sqrt(0.5) * math.sqrt(252))

    def test_no_losses_is_none(self, calculator):
        assert calculator.calculate_sortino_ratio([1.0, 2.0, 0.0], periods_per_year=252) is None

    def test_negative_mean(self, calculator):
        sortino = calculator.calculate_sortino_ratio([-1.0, -1.0], periods_per_year=252)

        assert sortino == pytest.approx(-math.sqrt(252))

    def test_losses_only_downside(self, calculator):
        sortino = calculator.calculate_sortino_ratio(
            [2.0, -1.0, 2.0, -1.0], periods_per_year=252, losses_only=True
        )

        assert sortino == pytest.approx(0.5 * math.sqrt(252))
