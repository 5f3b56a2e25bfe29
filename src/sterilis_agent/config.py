"""Configuration management for the Sterilis edge agent."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STERILIS_",
        extra="ignore",
    )

    # Metadata processor defaults
    metadata_timeout: float = 10.0
    metadata_fail_on_error: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None


settings = Settings()
