"""Configuration for dca-sweep."""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .engine import SimulationConfig


class Settings(BaseSettings):
    """Application settings, overridable through DCA_* environment variables."""

    # Input
    data_file_path: Optional[str] = None

    # Strategy
    purchase_amount: float = Field(default=100000.0, gt=0)  # Per purchase month
    purchase_period: int = Field(default=18, gt=0)  # Months
    hold_period: int = Field(default=12 * 20 - 18, ge=0)  # Months
    sell_period: int = Field(default=12 * 10, gt=0)  # Months

    # Evaluation
    expected_annualized_return_pct: float = 5.0
    include_last_window: bool = False

    # Output
    verbose: bool = False  # Log every buy and sell
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    class Config:
        env_prefix = "DCA_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def to_simulation_config(self) -> SimulationConfig:
        """Build the engine configuration."""
        return SimulationConfig(
            purchase_amount=self.purchase_amount,
            purchase_period=self.purchase_period,
            hold_period=self.hold_period,
            sell_period=self.sell_period,
            expected_annualized_return_pct=self.expected_annualized_return_pct,
            include_last_window=self.include_last_window,
        )
