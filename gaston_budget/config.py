"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="GASTON_", extra="ignore"
    )

    # Database
    database_url: str = "sqlite:///./gaston.db"

    # Service
    service_name: str = "gaston-budget"
    log_level: str = "INFO"

    # Defaults for new entities
    default_currency: str = "COP"

    # Debt priority thresholds (annual interest rate, percent)
    priority_high_rate: Decimal = Decimal("20")
    priority_medium_rate: Decimal = Decimal("12")


settings = Settings()
