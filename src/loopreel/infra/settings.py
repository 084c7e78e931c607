"""
Application settings for loopreel.

This module defines all configuration settings for loopreel using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Asset discovery
    assets_dir: str = Field(default="assets/gifs", alias="LOOPREEL_ASSETS_DIR")
    common_names: list[str] = Field(
        default_factory=lambda: ["lain-headbop.gif"],
        alias="LOOPREEL_COMMON_NAMES",
    )  # JSON list; first entry is the default name

    # Timing
    fallback_duration_ms: int = Field(default=3000, gt=0, alias="LOOPREEL_FALLBACK_DURATION_MS")
    display_fallback_min_ms: int = Field(default=5000, gt=0, alias="LOOPREEL_DISPLAY_FALLBACK_MIN_MS")
    display_fallback_max_ms: int = Field(default=10000, gt=0, alias="LOOPREEL_DISPLAY_FALLBACK_MAX_MS")

    # Selection policy
    common_weight: float = Field(default=0.7, alias="LOOPREEL_COMMON_WEIGHT")
    forced_rare_streak: int = Field(default=10, alias="LOOPREEL_FORCED_RARE_STREAK")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


def _resolve_env_file() -> str | None:
    """Locate the .env file loopreel reads at import time.

    LOOPREEL_ENV_FILE wins when it names an existing file; otherwise the first
    .env found in the working directory or above the installed package.
    """
    explicit = os.getenv("LOOPREEL_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    search = [Path.cwd(), *Path(__file__).resolve().parents]
    for directory in search:
        candidate = directory / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


settings = Settings(_env_file=_resolve_env_file())  # type: ignore[call-arg]
