"""Pytest configuration and fixtures for dca-sweep tests."""

import os
import sys

import numpy as np
import pytest

# Make the package importable without installation
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _root)

from dcasweep.data_loader import DataLoader
from dcasweep.engine import SimulationConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep DCA_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("DCA_"):
            monkeypatch.delenv(key)


@pytest.fixture
def loader():
    """Create data loader."""
    return DataLoader()


@pytest.fixture
def rising_series(loader):
    """40 months rising linearly from 100 to 139."""
    return loader.from_prices(100.0 + np.arange(40), start_year=2000, start_month=1)


@pytest.fixture
def flat_series(loader):
    """60 months at a constant price of 100."""
    return loader.from_prices([100.0] * 60, start_year=2000, start_month=1)


@pytest.fixture
def declining_series(loader):
    """60 months falling from 200 by 2 per month."""
    return loader.from_prices(200.0 - 2 * np.arange(60), start_year=2000, start_month=1)


@pytest.fixture
def short_config():
    """18 months buy, 2 hold, 10 sell."""
    return SimulationConfig(
        purchase_amount=1000.0,
        purchase_period=18,
        hold_period=2,
        sell_period=10,
    )


@pytest.fixture
def sample_csv(tmp_path):
    """CSV file with a header, a comment and six monthly records."""
    path = tmp_path / "prices.csv"
    path.write_text(
        "Date,Price\n"
        "# MSCI World, monthly close\n"
        "1999-10,100.0\n"
        "1999-11,50.0\n"
        "1999-12,100.0\n"
        "2000-01,100.0\n"
        "2000-02,110.5\n"
        "2000-03,120.25\n",
        encoding="utf-8",
    )
    return path
