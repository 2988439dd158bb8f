"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    itemspread_env: str = "development"
    itemspread_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Workload advisory (n² × steps × iterations)
    operations_warning_threshold: int = 50_000_000
    operations_confirm_threshold: int = 500_000_000

    # Request limits
    max_points: int = 5000
    median_sample_cap: int = 2000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
