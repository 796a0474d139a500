"""Engine settings with environment variable support.

Uses pydantic-settings for typed configuration validation. Only operational
knobs live here; financial constants are in ``rentability.core.constants``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from rentability.core.exceptions import ConfigurationError


class EngineSettings(BaseSettings):
    """Engine configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON lines")

    # Versioning of the calculation, stamped on every compute response
    calculation_version: str = Field(default="2025.1", min_length=1, description="Calculation version")

    model_config = {
        "env_prefix": "RENTABILITY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached engine settings."""
    try:
        return EngineSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid RENTABILITY_* environment: {e}") from e
