"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Calculator Suite"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Amortization engine
    max_amortization_periods: int = 600  # 50 years of monthly payments
    payoff_epsilon: float = 0.01

    # Maximum schedule rows returned by the API (0 = no limit)
    schedule_row_limit: int = 0

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
