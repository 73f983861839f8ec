"""Configuration: environment access, defaults and layered settings."""

from goosechat.config.environment import Environment
from goosechat.config.hierarchy import load_settings
from goosechat.config.schema import Settings

__all__ = ["Environment", "Settings", "load_settings"]
