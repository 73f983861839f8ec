"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Agent executable
DEFAULT_TIMEOUT_MINUTES = 10.0
DEFAULT_MAX_TURNS = 100
DEFAULT_PROBE_TIMEOUT_SECONDS = 10.0

# Bound on concurrently running child processes
DEFAULT_MAX_PROCESSES = 4

# Model locator
DEFAULT_LOCATOR_TIMEOUT_SECONDS = 10.0

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "timeout_minutes": DEFAULT_TIMEOUT_MINUTES,
        "max_turns": DEFAULT_MAX_TURNS,
        "probe_timeout_seconds": DEFAULT_PROBE_TIMEOUT_SECONDS,
        "max_processes": DEFAULT_MAX_PROCESSES,
        "locator_timeout_seconds": DEFAULT_LOCATOR_TIMEOUT_SECONDS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
