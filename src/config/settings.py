# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings. Environment
variables use the LPCSHEET_ prefix (e.g. LPCSHEET_CACHE_ROOT).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="LPCSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Paths ===
    cache_root: Path = Path("./cache")
    spritesheet_root: Path = Path("./spritesheets")

    # === Memory tier ===
    memory_cache_ttl_s: float = 3600.0
    memory_cache_check_period_s: float = 600.0
    memory_key_mode: Literal["fingerprint", "request"] = "fingerprint"

    # === Batches ===
    max_batch_size: int = 200
    pregenerate_concurrency: int = 4

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("max_batch_size", "pregenerate_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.memory_cache_ttl_s <= 0:
            errors.append("MEMORY_CACHE_TTL_S must be > 0")

        if self.memory_cache_check_period_s < 0:
            errors.append("MEMORY_CACHE_CHECK_PERIOD_S must be >= 0")

        if self.pregenerate_concurrency > self.max_batch_size:
            errors.append("PREGENERATE_CONCURRENCY must be <= MAX_BATCH_SIZE")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
