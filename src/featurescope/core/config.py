"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: FEATURESCOPE_
    """

    model_config = SettingsConfigDict(
        env_prefix="FEATURESCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sampling
    sample_cap: int = Field(
        default=10_000,
        description="Row limit requested when the cost policy selects sampling",
    )

    # Feature extraction
    top_values_limit: int = Field(
        default=10,
        description="Number of most frequent values reported for categorical columns",
    )
    histogram_bins: int = Field(
        default=10,
        description="Number of histogram bins for numeric columns",
    )

    # Comparison
    significance_threshold: float = Field(
        default=0.2,
        description="Distance above which two feature sets differ significantly",
    )
    top_contributors_limit: int = Field(
        default=5,
        description="Maximum number of contributing features reported per distance",
    )

    # X-ray
    decimal_places: int = Field(
        default=2,
        description="Significant decimal places kept when trimming floats for display",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
