"""Trade ledger for a single simulation window."""

from dataclasses import dataclass
from typing import Callable, Optional


class LedgerStateError(RuntimeError):
    """Raised when the ledger is read in a state that has no defined result."""


@dataclass(frozen=True)
class TradeEvent:
    """A ledger transaction, reported to observers."""

    kind: str  # "buy", "sell" or "hold"
    price: float
    shares: float
    monetary_amount: float
    share_balance: float
    months: int = 0  # Only set for "hold"


TradeObserver = Callable[[TradeEvent], None]


class TradeLedger:
    """Accumulates buys and sells of one window.

    Average buy and sell prices are unweighted means over transactions,
    not volume weighted. They are reporting values only; the result is
    computed from the cash balance.
    """

    def __init__(self, observer: Optional[TradeObserver] = None):
        """Initialize ledger.

        Args:
            observer: Called with a TradeEvent after each buy and sell
        """
        self.share_balance = 0.0
        self.monetary_balance = 0.0
        self.accumulated_investment = 0.0
        self.buy_count = 0
        self.sell_count = 0
        self.average_buy_price = 0.0
        self.average_sell_price = 0.0
        self._observer = observer

    @property
    def result_in_percent(self) -> float:
        """Net cash flow as percentage of money invested."""
        if self.buy_count == 0:
            raise LedgerStateError("No buys recorded, result is undefined")
        return self.monetary_balance * 100 / self.accumulated_investment

    def buy(self, share_price: float, monetary_amount: float) -> float:
        """Buy shares for a fixed amount of money.

        Args:
            share_price: Price per share
            monetary_amount: Money spent

        Returns:
            Number of shares bought
        """
        if share_price <= 0:
            raise ValueError(f"Share price must be positive, got {share_price}")
        if monetary_amount <= 0:
            raise ValueError(f"Monetary amount must be positive, got {monetary_amount}")

        self.accumulated_investment += monetary_amount

        shares_bought = monetary_amount / share_price

        self.share_balance += shares_bought
        self.monetary_balance -= monetary_amount

        if self.buy_count == 0:
            self.average_buy_price = share_price
        else:
            self.average_buy_price = (
                self.average_buy_price * self.buy_count + share_price
            ) / (self.buy_count + 1)

        self.buy_count += 1

        self._notify("buy", share_price, shares_bought, monetary_amount)
        return shares_bought

    def sell(self, share_price: float, proportion_of_share_balance: float) -> float:
        """Sell a proportion of the current share balance.

        Args:
            share_price: Price per share
            proportion_of_share_balance: Fraction of held shares to sell, 0..1

        Returns:
            Number of shares sold
        """
        if share_price <= 0:
            raise ValueError(f"Share price must be positive, got {share_price}")
        if not 0 <= proportion_of_share_balance <= 1:
            raise ValueError(
                f"Proportion must be in [0, 1], got {proportion_of_share_balance}"
            )

        shares_sold = self.share_balance * proportion_of_share_balance
        monetary_amount = shares_sold * share_price

        self.share_balance -= shares_sold
        self.monetary_balance += monetary_amount

        if self.sell_count == 0:
            self.average_sell_price = share_price
        else:
            self.average_sell_price = (
                self.average_sell_price * self.sell_count + share_price
            ) / (self.sell_count + 1)

        self.sell_count += 1

        self._notify("sell", share_price, shares_sold, monetary_amount)
        return shares_sold

    def hold(self, months: int) -> None:
        """Record a hold period. Balances are not touched."""
        self._notify("hold", 0.0, 0.0, 0.0, months=months)

    def _notify(
        self,
        kind: str,
        price: float,
        shares: float,
        amount: float,
        months: int = 0,
    ) -> None:
        if self._observer is None:
            return
        self._observer(
            TradeEvent(
                kind=kind,
                price=price,
                shares=shares,
                monetary_amount=amount,
                share_balance=self.share_balance,
                months=months,
            )
        )

    def summary(self) -> str:
        """Render balances and average prices."""
        return "\n".join(
            [
                f"Monetary balance: {self.monetary_balance}",
                f"Share balance: {self.share_balance}",
                f"Average buy price: {self.average_buy_price}",
                f"Average sell price: {self.average_sell_price}",
            ]
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "share_balance": self.share_balance,
            "monetary_balance": self.monetary_balance,
            "accumulated_investment": self.accumulated_investment,
            "buy_count": self.buy_count,
            "sell_count": self.sell_count,
            "average_buy_price": self.average_buy_price,
            "average_sell_price": self.average_sell_price,
        }
