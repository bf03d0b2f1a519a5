"""Tests for return metrics."""

import math

import pytest

from dcasweep.metrics import AnnualizationError, SweepStats, annualize_return


class TestAnnualizeReturn:
    """Test annualized return calculation."""

    @pytest.mark.parametrize("years", [0.25, 1.0, 2.5, 30.0])
    def test_zero_return(self, years):
        """Test zero total return annualizes to zero."""
        assert annualize_return(0.0, years) == 0.0

    def test_one_year(self):
        """Test one year period returns the total return."""
        assert annualize_return(12.5, 1.0) == pytest.approx(12.5)

    def test_compounding(self):
        """Test 21% over two years is 10% per year."""
        assert annualize_return(21.0, 2.0) == pytest.approx(10.0)

    def test_negative_return(self):
        """Test negative return above -100% is real."""
        # 0.81 ** 0.5 = 0.9
        assert annualize_return(-19.0, 2.0) == pytest.approx(-10.0)

    def test_monotonic(self):
        """Test annualized return increases with total return."""
        totals = [-90.0, -50.0, -1.0, 0.0, 1.0, 50.0, 300.0]
        annualized = [annualize_return(t, 7.5) for t in totals]
        assert annualized == sorted(annualized)
        assert len(set(annualized)) == len(annualized)

    @pytest.mark.parametrize("total", [-100.0, -150.0])
    def test_total_loss_raises(self, total):
        """Test -100% or worse is an explicit failure."""
        with pytest.raises(AnnualizationError):
            annualize_return(total, 2.0)

    @pytest.mark.parametrize("years", [0.0, -1.0])
    def test_non_positive_years(self, years):
        """Test period length must be positive."""
        with pytest.raises(ValueError):
            annualize_return(10.0, years)


class TestSweepStats:
    """Test SweepStats folding."""

    def test_initial_state(self):
        """Test statistics before any window."""
        stats = SweepStats()
        assert stats.worst_result == math.inf
        assert stats.best_result == -math.inf
        assert stats.worst_annualized == 0.0
        assert stats.number_of_results == 0
        assert stats.success_rate == 0.0

    def test_worst_and_best(self):
        """Test worst and best track total result."""
        stats = SweepStats()
        stats.add(10.0, 1.0, 1.0, False)
        stats.add(-5.0, -0.5, 1.0, False)
        stats.add(30.0, 3.0, 1.0, True)

        assert stats.worst_result == -5.0
        assert stats.worst_annualized == -0.5
        assert stats.best_result == 30.0
        assert stats.best_annualized == 3.0

    def test_ties_keep_first(self):
        """Test equal results do not replace worst or best."""
        stats = SweepStats()
        stats.add(10.0, 1.0, 1.0, True)
        stats.add(10.0, 2.0, 1.0, True)

        assert stats.worst_annualized == 1.0
        assert stats.best_annualized == 1.0

    def test_incremental_average(self):
        """Test running mean and its annualization."""
        stats = SweepStats()
        stats.add(10.0, annualize_return(10.0, 2.0), 2.0, True)
        stats.add(20.0, annualize_return(20.0, 2.0), 2.0, True)
        stats.add(30.0, annualize_return(30.0, 2.0), 2.0, True)

        assert stats.average_result == pytest.approx(20.0)
        assert stats.average_annualized == pytest.approx(annualize_return(20.0, 2.0))

    def test_first_average_uses_window_values(self):
        """Test first window sets average directly."""
        stats = SweepStats()
        stats.add(44.0, 4.4, 10.0, False)
        assert stats.average_result == 44.0
        assert stats.average_annualized == 4.4

    def test_counts(self):
        """Test pass/fail counting."""
        stats = SweepStats()
        for meets in [True, False, True, True]:
            stats.add(1.0, 1.0, 1.0, meets)

        assert stats.number_of_results == 4
        assert stats.positive_results == 3
        assert stats.negative_results == 1
        assert stats.success_rate == 75.0

    def test_to_dict(self):
        """Test conversion to dictionary."""
        stats = SweepStats()
        stats.add(5.0, 0.5, 1.0, True)
        d = stats.to_dict()

        assert d["number_of_results"] == 1
        assert "average_annualized" in d
        assert "success_rate" in d
