"""Command line entry point for dca-sweep."""

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from .config import Settings
from .data_loader import DataFormatError, DataLoader
from .engine import InsufficientDataError, SweepEngine
from .ledger import TradeEvent
from .metrics import AnnualizationError
from .reporter import SweepReporter, format_trade_event

logger = logging.getLogger(__name__)


def log_trade_event(event: TradeEvent) -> None:
    logger.info(format_trade_event(event))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dca-sweep",
        description="Evaluate a buy / hold / sell dollar-cost-averaging strategy "
        "for every start month of a monthly index price series.",
    )
    parser.add_argument("data_file", nargs="?", help="CSV file with YYYY-MM,price records")
    parser.add_argument("--purchase-amount", type=float)
    parser.add_argument("--purchase-period", type=int, help="Months of buying")
    parser.add_argument("--hold-period", type=int, help="Months of holding")
    parser.add_argument("--sell-period", type=int, help="Months of selling")
    parser.add_argument(
        "--expected-return",
        type=float,
        dest="expected_annualized_return_pct",
        help="Expected annualized return in percent",
    )
    parser.add_argument(
        "--include-last-window",
        action="store_true",
        default=None,
        help="Also simulate the window ending on the last month",
    )
    parser.add_argument("--verbose", action="store_true", default=None, help="Log every trade")
    parser.add_argument("--output", help="Also write the report to this file")
    parser.add_argument("--windows-csv", help="Write every window result to this CSV file")
    parser.add_argument("--log-level")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Layer command line overrides over environment settings."""
    overrides = {
        "data_file_path": args.data_file,
        "purchase_amount": args.purchase_amount,
        "purchase_period": args.purchase_period,
        "hold_period": args.hold_period,
        "sell_period": args.sell_period,
        "expected_annualized_return_pct": args.expected_annualized_return_pct,
        "include_last_window": args.include_last_window,
        "verbose": args.verbose,
        "log_level": args.log_level,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[list[str]] = None) -> int:
    """Run a sweep and print the report.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not settings.data_file_path:
        logger.error("No data file given (argument or DCA_DATA_FILE_PATH)")
        return 2

    observer = log_trade_event if settings.verbose else None

    try:
        series = DataLoader().load_from_csv(settings.data_file_path)
        engine = SweepEngine(settings.to_simulation_config())
        result = engine.run(series, observer=observer)
    except FileNotFoundError as e:
        logger.error(f"Data file not found: {e.filename}")
        return 1
    except (DataFormatError, InsufficientDataError, AnnualizationError) as e:
        logger.error(f"Sweep aborted: {e}")
        return 1

    reporter = SweepReporter(result)
    reporter.print_report()

    if args.output:
        reporter.save_report(args.output)
    if args.windows_csv:
        reporter.save_windows_csv(args.windows_csv)

    return 0


if __name__ == "__main__":
    sys.exit(main())
