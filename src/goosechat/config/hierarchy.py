"""Configuration hierarchy: merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.goosechat/config.yaml)
  3. Project config  (./goosechat.yaml)
  4. Environment variables (GOOSE_*, GENAI_LOCATOR_*, GOOSECHAT_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from goosechat.config.defaults import get_defaults
from goosechat.config.environment import Environment
from goosechat.config.schema import Settings
from goosechat.errors.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".goosechat" / "config.yaml"
_PROJECT_CONFIG_NAME = "goosechat.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "GOOSE_CLI_PATH": "cli_path",
    "GOOSE_TIMEOUT_MINUTES": "timeout_minutes",
    "GOOSE_MAX_TURNS": "max_turns",
    "GOOSECHAT_PROVIDERS_CONFIG": "catalog_path",
    "GOOSECHAT_MAX_PROCESSES": "max_processes",
    "GOOSECHAT_LOG_LEVEL": "log_level",
    "GENAI_LOCATOR_CONFIG_URL": "locator_config_url",
    "GENAI_LOCATOR_API_KEY": "locator_api_key",
    "GENAI_LOCATOR_API_BASE": "locator_api_base",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "timeout_minutes": float,
    "max_turns": int,
    "max_processes": int,
    "probe_timeout_seconds": float,
    "locator_timeout_seconds": float,
}


def load_settings(env: Environment | None = None, **runtime_overrides: Any) -> Settings:
    """Load, merge and validate configuration from all sources.

    Raises ConfigLoadError if the merged values do not validate.
    """
    config = load_config_hierarchy(env, **runtime_overrides)
    try:
        return Settings.model_validate(config)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid settings: {e}", original=e) from e


def load_config_hierarchy(env: Environment | None = None, **runtime_overrides: Any) -> dict[str, Any]:
    """Merge all configuration layers into a flat dict."""
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars(env or Environment()))

    # Layer 5: Runtime arguments (highest priority)
    # Filter out None values; only override when explicitly set
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for goosechat.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars(env: Environment) -> dict[str, Any]:
    """Read the mapped environment variables that are set and non-empty."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = env.get(env_key)
        if value is None:
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    target_type = _TYPE_MAP.get(key)
    if target_type:
        try:
            return target_type(value)
        except (ValueError, TypeError):
            logger.warning(
                "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
            )
            return value

    return value
