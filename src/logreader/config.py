"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """logreader configuration — loaded from env vars / .env file."""

    model_config = SettingsConfigDict(env_prefix="LOGREADER_", env_file=".env")

    default_format: str = Field(
        default="combined",
        description="Named format (common|combined) or an Apache format string",
    )
    skip_invalid: bool = Field(default=True, description="Skip lines that don't match the format")
    max_workers: int = Field(default=4, description="Worker processes for large files")
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")


settings = Settings()
