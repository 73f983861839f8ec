"""Pydantic model for resolved application settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from goosechat.config.defaults import (
    DEFAULT_LOCATOR_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_PROCESSES,
    DEFAULT_MAX_TURNS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUT_MINUTES,
)


class Settings(BaseModel):
    """Effective settings after merging every configuration layer.

    The discovery bypass flag is not a setting; discovery reads it from the
    environment on every call.
    """

    cli_path: str | None = None
    timeout_minutes: float = Field(default=DEFAULT_TIMEOUT_MINUTES, gt=0)
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1)
    probe_timeout_seconds: float = Field(default=DEFAULT_PROBE_TIMEOUT_SECONDS, gt=0)
    max_processes: int = Field(default=DEFAULT_MAX_PROCESSES, ge=1)

    catalog_path: Path | None = None

    locator_config_url: str | None = None
    locator_api_key: str | None = Field(default=None, repr=False)
    locator_api_base: str | None = None
    locator_timeout_seconds: float = Field(default=DEFAULT_LOCATOR_TIMEOUT_SECONDS, gt=0)

    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_minutes * 60.0

    @property
    def locator_configured(self) -> bool:
        return bool(self.locator_config_url)
