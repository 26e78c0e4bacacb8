"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render logs as JSON")

    # Feature flags
    enable_export: bool = Field(default=True, description="Enable snapshot export")

    # Persistence
    storage_backend: Literal["memory", "file"] = Field(default="file", description="Key-value backend")
    storage_dir: str = Field(default=".mimmoza_storage", description="Directory for the file backend")
    snapshot_prefix: str = Field(
        default="mimmoza.investisseur.rentabilite.v1.",
        description="Key prefix of profitability snapshots",
    )
    deal_context_key: str = Field(
        default="mimmoza.marchand.dealContext.v1",
        description="Key of the active deal context",
    )
    export_dir: str = Field(default="results", description="Directory for JSON exports")

    # Decision rules
    thresholds_preset: str = Field(default="Standard", description="Decision thresholds preset name")

    model_config = {
        "env_prefix": "MIMMOZA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
