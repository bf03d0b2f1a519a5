"""Core sweep engine.

Runs the buy / hold / sell strategy for every start month of a price
series and folds the results into sweep statistics.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from .data_loader import PricePoint, PriceSeries
from .ledger import TradeLedger, TradeObserver
from .metrics import MONTHS_PER_YEAR, SweepStats, annualize_return

logger = logging.getLogger(__name__)


class InsufficientDataError(ValueError):
    """Raised when a series is too short for a single window."""


@dataclass
class SimulationConfig:
    """Configuration for a sweep."""

    purchase_amount: float = 100000.0  # Invested every purchase month
    purchase_period: int = 18  # Months
    hold_period: int = 12 * 20 - 18  # Months
    sell_period: int = 12 * 10  # Months
    expected_annualized_return_pct: float = 5.0
    include_last_window: bool = False  # Also run the window ending on the last point

    def __post_init__(self) -> None:
        if self.purchase_period <= 0:
            raise ValueError(f"purchase_period must be positive, got {self.purchase_period}")
        if self.hold_period < 0:
            raise ValueError(f"hold_period must not be negative, got {self.hold_period}")
        if self.sell_period <= 0:
            raise ValueError(f"sell_period must be positive, got {self.sell_period}")
        if self.purchase_amount <= 0:
            raise ValueError(f"purchase_amount must be positive, got {self.purchase_amount}")

    @property
    def total_months(self) -> int:
        """Length of one window in months."""
        return self.purchase_period + self.hold_period + self.sell_period

    @property
    def total_length_in_years(self) -> float:
        return self.total_months / MONTHS_PER_YEAR


class WindowSimulator:
    """Simulates the strategy for one start month."""

    def __init__(self, series: PriceSeries, start_index: int, config: SimulationConfig):
        """Initialize simulator.

        Args:
            series: Full price series
            start_index: Position of the first purchase month
            config: Phase lengths and purchase amount

        Raises:
            IndexError: If the window does not fit into the series
        """
        if start_index < 0 or start_index + config.total_months > len(series):
            raise IndexError(
                f"Window starting at {start_index} with {config.total_months} months "
                f"does not fit a series of {len(series)} points"
            )

        self.series = series
        self.start_index = start_index
        self.config = config

    @property
    def first_purchase_point(self) -> PricePoint:
        return self.series[self.start_index]

    @property
    def last_purchase_point(self) -> PricePoint:
        return self.series[self.start_index + self.config.purchase_period - 1]

    @property
    def first_sell_point(self) -> PricePoint:
        return self.series[
            self.start_index + self.config.purchase_period + self.config.hold_period
        ]

    @property
    def last_sell_point(self) -> PricePoint:
        return self.series[self.start_index + self.config.total_months - 1]

    @property
    def total_length_in_years(self) -> float:
        return self.config.total_length_in_years

    def run(self, observer: Optional[TradeObserver] = None) -> TradeLedger:
        """Run purchase, hold and sell phases.

        Args:
            observer: Receives every ledger transaction

        Returns:
            Ledger after the last sell
        """
        ledger = TradeLedger(observer=observer)
        cfg = self.config
        offset = self.start_index

        for i in range(cfg.purchase_period):
            ledger.buy(self.series[offset + i].price, cfg.purchase_amount)

        offset += cfg.purchase_period

        if cfg.hold_period > 0:
            offset += cfg.hold_period
            ledger.hold(cfg.hold_period)

        # Selling 1/remaining of the live balance empties it on the last month
        for i in range(cfg.sell_period):
            ledger.sell(self.series[offset + i].price, 1 / (cfg.sell_period - i))

        return ledger


@dataclass
class WindowResult:
    """Outcome of one simulated window."""

    start_index: int
    first_purchase: PricePoint
    last_purchase: PricePoint
    first_sell: PricePoint
    last_sell: PricePoint
    result_pct: float
    annualized_pct: float
    meets_expectation: bool
    ledger: TradeLedger

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start_index": self.start_index,
            "first_purchase": self.first_purchase.period_name,
            "last_purchase": self.last_purchase.period_name,
            "first_sell": self.first_sell.period_name,
            "last_sell": self.last_sell.period_name,
            "result_pct": self.result_pct,
            "annualized_pct": self.annualized_pct,
            "meets_expectation": self.meets_expectation,
            "average_buy_price": self.ledger.average_buy_price,
            "average_sell_price": self.ledger.average_sell_price,
        }


@dataclass
class SweepResult:
    """Result of a sweep over all start months."""

    config: SimulationConfig
    series: PriceSeries
    stats: SweepStats = field(default_factory=SweepStats)
    windows: list[WindowResult] = field(default_factory=list)

    @property
    def shortfalls(self) -> list[WindowResult]:
        """Windows below the expected annualized return, oldest first."""
        return [w for w in self.windows if not w.meets_expectation]

    def to_dataframe(self) -> pd.DataFrame:
        """Window results as a DataFrame, one row per start month."""
        columns = [
            "start_index",
            "first_purchase",
            "last_purchase",
            "first_sell",
            "last_sell",
            "result_pct",
            "annualized_pct",
            "meets_expectation",
            "average_buy_price",
            "average_sell_price",
        ]
        return pd.DataFrame([w.to_dict() for w in self.windows], columns=columns)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "stats": self.stats.to_dict(),
            "num_windows": len(self.windows),
            "num_points": len(self.series),
            "start_period": self.series.start_period,
            "end_period": self.series.end_period,
        }


class SweepEngine:
    """Runs the strategy for every valid start month."""

    def __init__(self, config: Optional[SimulationConfig] = None):
        """Initialize sweep engine.

        Args:
            config: Sweep configuration
        """
        self.config = config or SimulationConfig()

    def count_windows(self, series: PriceSeries) -> int:
        """Number of start months the sweep will simulate."""
        available = len(series) - self.config.total_months
        if self.config.include_last_window:
            available += 1
        return max(0, available)

    def run(
        self,
        series: PriceSeries,
        observer: Optional[TradeObserver] = None,
    ) -> SweepResult:
        """Run a sweep.

        Args:
            series: Monthly price series
            observer: Receives every ledger transaction of every window

        Returns:
            SweepResult with statistics and per-window results

        Raises:
            InsufficientDataError: If the series is shorter than one window
        """
        cfg = self.config
        if len(series) < cfg.total_months:
            raise InsufficientDataError(
                f"Need at least {cfg.total_months} months of data, got {len(series)}"
            )

        result = SweepResult(config=cfg, series=series)
        num_windows = self.count_windows(series)

        logger.info(
            f"Running sweep over {len(series)} months "
            f"({series.start_period} to {series.end_period}): "
            f"{num_windows} windows of {cfg.total_months} months"
        )

        for start_at in range(num_windows):
            window = self._run_window(series, start_at, observer)
            result.windows.append(window)
            result.stats.add(
                window.result_pct,
                window.annualized_pct,
                cfg.total_length_in_years,
                window.meets_expectation,
            )

        stats = result.stats
        logger.info(
            f"Sweep complete: {stats.number_of_results} windows, "
            f"worst: {stats.worst_annualized:.1f}%, "
            f"best: {stats.best_annualized:.1f}%, "
            f"average: {stats.average_annualized:.1f}%"
        )

        return result

    def _run_window(
        self,
        series: PriceSeries,
        start_at: int,
        observer: Optional[TradeObserver],
    ) -> WindowResult:
        simulator = WindowSimulator(series, start_at, self.config)
        ledger = simulator.run(observer)

        result_pct = ledger.result_in_percent
        annualized = annualize_return(result_pct, simulator.total_length_in_years)
        meets = not annualized < self.config.expected_annualized_return_pct

        logger.debug(
            f"Window {start_at} ({simulator.first_purchase_point.period_name}): "
            f"result {result_pct:.2f}%, annualized {annualized:.2f}%"
        )

        return WindowResult(
            start_index=start_at,
            first_purchase=simulator.first_purchase_point,
            last_purchase=simulator.last_purchase_point,
            first_sell=simulator.first_sell_point,
            last_sell=simulator.last_sell_point,
            result_pct=result_pct,
            annualized_pct=annualized,
            meets_expectation=meets,
            ledger=ledger,
        )
