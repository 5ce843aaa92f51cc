"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values can be overridden in a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Data file paths
    input_path: str = "data/raw/nashville_housing.csv"
    output_path: str = "data/processed/nashville_housing_clean.csv"
    summary_output_path: str = "data/processed/nashville_housing_city_summary.csv"

    # Database settings (when set, the default CLI input)
    database_url: Optional[str] = None
    source_table: str = "NashvilleHousing"
    output_table: str = "NashvilleHousingClean"
    summary_table: str = "NashvilleHousingCitySummary"

    # Cleaning settings
    display_date_format: str = "%m/%d/%Y"
    dropped_columns: List[str] = ["OwnerAddress", "TaxDistrict"]

    # Analytics settings
    rolling_window_preceding: int = 30  # rows, not days

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"


# Singleton instance
settings = Settings()
