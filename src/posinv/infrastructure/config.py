"""Runtime configuration, read from ``POSINV_*`` environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    """Settings for storage, stock reservation retries and logging."""

    model_config = SettingsConfigDict(env_prefix="POSINV_", case_sensitive=False)

    # Directory holding stock.json, products.json and orders.json
    data_dir: Path = _DEFAULT_DATA_DIR

    # Attempts before a contended reservation gives up
    reserve_max_attempts: int = Field(default=5, ge=1)

    # First retry delay; doubles on each further attempt
    reserve_backoff_seconds: float = Field(default=0.01, ge=0)

    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
