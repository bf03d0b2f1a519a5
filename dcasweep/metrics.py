"""Return metrics for the sweep.

Calculates:
- Annualized (compound) return from a total return
- Running worst / best / average statistics across windows
"""

import math
from dataclasses import dataclass

MONTHS_PER_YEAR = 12


class AnnualizationError(ArithmeticError):
    """Raised when a total return has no real annualized equivalent."""


def annualize_return(total_return_pct: float, years: float) -> float:
    """Convert a total return into a compound annual rate.

    Args:
        total_return_pct: Total return over the period, in percent
        years: Period length in years

    Returns:
        Annualized return in percent

    Raises:
        ValueError: If years is not positive
        AnnualizationError: If the total return is -100% or worse
    """
    if years <= 0:
        raise ValueError(f"Years must be positive, got {years}")

    growth = 1 + total_return_pct / 100
    if growth <= 0:
        raise AnnualizationError(
            f"Total return of {total_return_pct}% cannot be annualized"
        )

    return (math.pow(growth, 1 / years) - 1) * 100


@dataclass
class SweepStats:
    """Statistics folded over all windows of a sweep, oldest start first."""

    worst_result: float = math.inf
    worst_annualized: float = 0.0
    best_result: float = -math.inf
    best_annualized: float = 0.0
    average_result: float = 0.0
    average_annualized: float = 0.0
    number_of_results: int = 0
    negative_results: int = 0  # Windows below the expected annualized return
    positive_results: int = 0

    def add(
        self,
        result_pct: float,
        annualized_pct: float,
        years: float,
        meets_expectation: bool,
    ) -> None:
        """Fold one window result into the statistics.

        Args:
            result_pct: Total return of the window in percent
            annualized_pct: Annualized return of the window
            years: Window length in years
            meets_expectation: Whether the window reached the expected return
        """
        if result_pct < self.worst_result:
            self.worst_result = result_pct
            self.worst_annualized = annualized_pct

        if result_pct > self.best_result:
            self.best_result = result_pct
            self.best_annualized = annualized_pct

        if self.number_of_results == 0:
            self.average_result = result_pct
            self.average_annualized = annualized_pct
        else:
            n = self.number_of_results
            self.average_result = (self.average_result * n + result_pct) / (n + 1)
            # Every window of a sweep has the same length
            self.average_annualized = annualize_return(self.average_result, years)

        if meets_expectation:
            self.positive_results += 1
        else:
            self.negative_results += 1

        self.number_of_results += 1

    @property
    def success_rate(self) -> float:
        """Share of windows meeting expectations, in percent."""
        if self.number_of_results == 0:
            return 0.0
        return self.positive_results / self.number_of_results * 100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "worst_result": self.worst_result,
            "worst_annualized": self.worst_annualized,
            "best_result": self.best_result,
            "best_annualized": self.best_annualized,
            "average_result": self.average_result,
            "average_annualized": self.average_annualized,
            "number_of_results": self.number_of_results,
            "negative_results": self.negative_results,
            "positive_results": self.positive_results,
            "success_rate": self.success_rate,
        }
