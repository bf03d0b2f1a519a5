"""Report generation for sweep results."""

import logging

from .engine import SweepResult, WindowResult
from .ledger import TradeEvent

logger = logging.getLogger(__name__)


def format_trade_event(event: TradeEvent) -> str:
    """Render a ledger transaction as a verbose log line."""
    if event.kind == "buy":
        return f"{event.shares} shares bought at {event.price} per share"
    if event.kind == "sell":
        return f"{event.shares} shares sold at {event.price} per share"
    if event.kind == "hold":
        return f"{event.share_balance} shares held for {event.months} months"
    raise ValueError(f"Unknown trade event kind: {event.kind}")


class SweepReporter:
    """Generates reports from sweep results."""

    def __init__(self, result: SweepResult):
        """Initialize reporter.

        Args:
            result: Sweep result to report on
        """
        self.result = result

    @staticmethod
    def format_window_line(window: WindowResult) -> str:
        """Render one window below expectations.

        Args:
            window: Window result

        Returns:
            Detail line
        """
        return (
            f"In: {window.first_purchase.period_name} - {window.last_purchase.period_name} | "
            f"Out: {window.first_sell.period_name} - {window.last_sell.period_name} | "
            f"Result: {window.result_pct:.1f}% | "
            f"Annualized: {window.annualized_pct:.1f}%"
        )

    def generate_detail_lines(self) -> list[str]:
        """Detail lines for every window not meeting expectations."""
        return [self.format_window_line(w) for w in self.result.shortfalls]

    def generate_summary(self) -> str:
        """Generate the summary block.

        Returns:
            Summary string
        """
        s = self.result.stats
        lines = [
            f"Worst annualized result: {s.worst_annualized:.1f}%",
            f"Best annualized result: {s.best_annualized:.1f}%",
            f"Average annualized result: {s.average_annualized:.1f}%",
            f"Results not meeting expectations: {s.negative_results}",
            f"Results meeting expectations: {s.positive_results}",
        ]
        return "\n".join(lines)

    def generate_report(self) -> str:
        """Detail lines, a blank line, then the summary."""
        return "\n".join(self.generate_detail_lines() + ["", self.generate_summary()])

    def save_report(self, filepath: str) -> None:
        """Save text report to file.

        Args:
            filepath: Output file path
        """
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.generate_report() + "\n")
        logger.info(f"Report saved to {filepath}")

    def save_windows_csv(self, filepath: str) -> None:
        """Save every window result as CSV.

        Args:
            filepath: Output file path
        """
        df = self.result.to_dataframe()
        df.to_csv(filepath, index=False, float_format="%.4f")
        logger.info(f"{len(df)} window results saved to {filepath}")

    def print_report(self) -> None:
        """Print report to console."""
        print(self.generate_report())
