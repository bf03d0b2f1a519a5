"""Dollar-cost-averaging sweep over historical index prices.

This module provides:
- Monthly price series loading
- Per-window buy / hold / sell simulation
- Sweep over every start month with worst / best / average statistics
- Report generation
"""

from .data_loader import DataFormatError, DataLoader, PricePoint, PriceSeries
from .engine import (
    InsufficientDataError,
    SimulationConfig,
    SweepEngine,
    SweepResult,
    WindowResult,
    WindowSimulator,
)
from .ledger import LedgerStateError, TradeEvent, TradeLedger
from .metrics import AnnualizationError, SweepStats, annualize_return
from .reporter import SweepReporter, format_trade_event

__version__ = "0.1.0"

__all__ = [
    "AnnualizationError",
    "DataFormatError",
    "DataLoader",
    "InsufficientDataError",
    "LedgerStateError",
    "PricePoint",
    "PriceSeries",
    "SimulationConfig",
    "SweepEngine",
    "SweepReporter",
    "SweepResult",
    "SweepStats",
    "TradeEvent",
    "TradeLedger",
    "WindowResult",
    "WindowSimulator",
    "annualize_return",
    "format_trade_event",
]
