"""
Module: settings

Purpose: Centralized configuration management for the car sales data core.

Key Functions:
- get_settings: Load settings from environment variables
- DashboardSettings: Pydantic settings model with validation

Architecture Notes:
- Uses pydantic-settings for type-safe configuration
- All settings have sensible defaults
- Environment variables (CARSALES_*) and a .env file override defaults
"""

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from carsales.pipeline import DashboardConfig


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CARSALES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data
    data_path: str | None = Field(default=None, description="car_prices.csv or parquet export")
    tables_override_path: str | None = Field(default=None, description="YAML categorization overrides")

    # Aggregation
    long_tail_threshold: float = Field(default=0.025, ge=0, lt=1)
    top_brands_per_bucket: int = Field(default=5, ge=1)
    price_window_min: float = Field(default=1000, ge=0)
    price_window_max: float = Field(default=30000, gt=0)
    scatter_max_points: int = Field(default=2000, ge=1)

    # Logging
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @model_validator(mode="after")
    def check_price_window(self) -> "DashboardSettings":
        if self.price_window_min > self.price_window_max:
            raise ValueError("price_window_min must not exceed price_window_max")
        return self

    def to_dashboard_config(self) -> "DashboardConfig":
        """Build a pipeline config, applying YAML table overrides when configured."""
        from carsales.features.table_overrides import apply_table_overrides, load_table_overrides_safe
        from carsales.pipeline import DashboardConfig

        overrides = load_table_overrides_safe(self.tables_override_path)
        config = DashboardConfig(
            long_tail_threshold=self.long_tail_threshold,
            top_brands_per_bucket=self.top_brands_per_bucket,
            price_window=(self.price_window_min, self.price_window_max),
            scatter_max_points=self.scatter_max_points,
        )
        if overrides:
            config.categorization = apply_table_overrides(overrides)
        return config


@lru_cache(maxsize=1)
def get_settings() -> DashboardSettings:
    """Settings loaded once per process."""
    return DashboardSettings()
