"""Historical price loading for the sweep.

Supports loading monthly index prices from:
- CSV files (``YYYY-MM,price`` records, header lines skipped)
- Pandas DataFrames
- Plain price lists and synthetic random walks
"""

import csv
import logging
import math
import os
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

PERIOD_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")
# Fixed '.'-decimal notation, no digit grouping
PRICE_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


class DataFormatError(ValueError):
    """Raised when an input record cannot be parsed."""


@dataclass(frozen=True)
class PricePoint:
    """Share price observed for one month."""

    year: int
    month: int
    price: float

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be in 1..12, got {self.month}")
        if not (self.price > 0 and math.isfinite(self.price)):
            raise ValueError(f"Price must be positive and finite, got {self.price}")

    @property
    def period_name(self) -> str:
        """Period as zero-padded YYYY-MM."""
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return f"{self.year}-{self.month} - {self.price}"


class PriceSeries:
    """Ordered monthly price observations.

    Points are identified by position; the series is assumed to be sorted
    and contiguous, one record per month.
    """

    COLUMNS = ["year", "month", "price"]

    def __init__(self, points: Iterable[PricePoint], name: str = ""):
        """Initialize series.

        Args:
            points: Price points in chronological order
            name: Optional label (e.g. source file name)
        """
        self._points = list(points)
        self.name = name
        self.data = pd.DataFrame(
            {
                "year": [p.year for p in self._points],
                "month": [p.month for p in self._points],
                "price": [p.price for p in self._points],
            },
            columns=self.COLUMNS,
        )

    @property
    def num_points(self) -> int:
        """Number of monthly observations."""
        return len(self._points)

    @property
    def start_period(self) -> Optional[str]:
        return self._points[0].period_name if self._points else None

    @property
    def end_period(self) -> Optional[str]:
        return self._points[-1].period_name if self._points else None

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> PricePoint:
        return self._points[index]

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)

    def get_prices(self) -> np.ndarray:
        """Get array of share prices."""
        return self.data["price"].to_numpy(dtype=float)

    def __repr__(self) -> str:
        return (
            f"PriceSeries(name={self.name!r}, points={self.num_points}, "
            f"start={self.start_period}, end={self.end_period})"
        )


def parse_fields(period: str, price: str, line_number: int = 0) -> PricePoint:
    """Parse a period string and a price string.

    Args:
        period: "YYYY-MM"
        price: Decimal price
        line_number: 1-based line number used in error messages

    Returns:
        PricePoint

    Raises:
        DataFormatError: If the period or price is malformed
    """
    period = period.strip()
    price = price.strip()

    match = PERIOD_PATTERN.match(period)
    if not match:
        raise DataFormatError(f"Line {line_number}: invalid period {period!r}")
    if not PRICE_PATTERN.match(price):
        raise DataFormatError(f"Line {line_number}: invalid price {price!r}")

    try:
        return PricePoint(int(match.group(1)), int(match.group(2)), float(price))
    except ValueError as e:
        raise DataFormatError(f"Line {line_number}: {e}") from e


def parse_record(line: str, line_number: int = 0) -> PricePoint:
    """Parse one ``YYYY-MM,price`` record.

    Quoted fields are kept whole, so a quoted price with a grouping
    separator is rejected rather than truncated.

    Args:
        line: Raw input line
        line_number: 1-based line number used in error messages

    Returns:
        PricePoint

    Raises:
        DataFormatError: If the period or price is malformed
    """
    try:
        fields = next(csv.reader([line.strip()], skipinitialspace=True), [])
    except csv.Error as e:
        raise DataFormatError(f"Line {line_number}: {e}") from e

    fields = [f.strip().strip('"') for f in fields]
    if len(fields) < 2:
        raise DataFormatError(f"Line {line_number}: expected 'YYYY-MM,price', got {line.strip()!r}")

    return parse_fields(fields[0], fields[1], line_number)


def is_data_line(line: str) -> bool:
    """Records start with the first digit of a year; anything else is a header."""
    return line.startswith("1") or line.startswith("2")


class DataLoader:
    """Loads monthly price series."""

    def __init__(self, data_dir: Optional[str] = None):
        """Initialize data loader.

        Args:
            data_dir: Directory relative file paths are resolved against
        """
        self.data_dir = data_dir

    def load_from_dataframe(self, df: pd.DataFrame, name: str = "") -> PriceSeries:
        """Load series from a pandas DataFrame.

        Args:
            df: DataFrame with either period+price or year+month+price columns
            name: Series label

        Returns:
            PriceSeries object
        """
        if "price" not in df.columns:
            raise ValueError("Missing required column: price")

        if "period" in df.columns:
            records = zip(df["period"].astype(str), df["price"])
            return self.load_from_records(records, name=name)

        for col in ("year", "month"):
            if col not in df.columns:
                raise ValueError(f"Missing required column: {col}")

        points = [
            PricePoint(int(row.year), int(row.month), float(row.price))
            for row in df.itertuples(index=False)
        ]
        return PriceSeries(points, name=name)

    def load_from_records(
        self,
        records: Iterable[tuple[str, Union[str, float]]],
        name: str = "",
    ) -> PriceSeries:
        """Load series from (period, price) pairs.

        Args:
            records: Iterable of ("YYYY-MM", price)
            name: Series label

        Returns:
            PriceSeries object
        """
        points = [
            parse_fields(str(period), str(price), line_number)
            for line_number, (period, price) in enumerate(records, start=1)
        ]
        return PriceSeries(points, name=name)

    def load_from_csv(self, filepath: str) -> PriceSeries:
        """Load series from a CSV file.

        Lines not starting with '1' or '2' are treated as header or comment.

        Args:
            filepath: Path to CSV file

        Returns:
            PriceSeries object

        Raises:
            DataFormatError: On the first malformed or undecodable line
        """
        if self.data_dir and not os.path.isabs(filepath):
            filepath = os.path.join(self.data_dir, filepath)

        points = []
        skipped = 0
        with open(filepath, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8-sig")
                except UnicodeDecodeError as e:
                    raise DataFormatError(f"Line {line_number}: not valid UTF-8 ({e.reason})") from e

                if not is_data_line(line):
                    skipped += 1
                    continue
                points.append(parse_record(line, line_number))

        logger.info(f"Loaded {len(points)} records from {filepath} ({skipped} lines skipped)")
        return PriceSeries(points, name=filepath)

    def from_prices(
        self,
        prices: Iterable[float],
        start_year: int = 2000,
        start_month: int = 1,
        name: str = "",
    ) -> PriceSeries:
        """Build a series of consecutive months from bare prices.

        Args:
            prices: Share prices in chronological order
            start_year: Year of the first price
            start_month: Month of the first price

        Returns:
            PriceSeries object
        """
        points = []
        offset = start_month - 1
        for i, price in enumerate(prices):
            year, month = divmod(offset + i, 12)
            points.append(PricePoint(start_year + year, month + 1, float(price)))
        return PriceSeries(points, name=name)

    def generate_sample_data(
        self,
        num_months: int = 480,
        start_price: float = 100.0,
        monthly_drift: float = 0.006,
        volatility: float = 0.045,
        start_year: int = 1980,
        seed: int = 42,
    ) -> PriceSeries:
        """Generate a sample monthly index series for testing.

        Args:
            num_months: Number of months to generate
            start_price: Starting price
            monthly_drift: Mean monthly log return
            volatility: Monthly volatility
            start_year: Year of the first month
            seed: Random seed

        Returns:
            PriceSeries object
        """
        rng = np.random.default_rng(seed)
        log_returns = rng.normal(monthly_drift, volatility, num_months)
        if num_months > 0:
            log_returns[0] = 0.0
        prices = start_price * np.exp(np.cumsum(log_returns))
        return self.from_prices(prices, start_year=start_year, name="sample")
