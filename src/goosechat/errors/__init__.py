"""Error handling: exception hierarchy for configuration and discovery failures."""

from goosechat.errors.exceptions import (
    ConfigLoadError,
    DiscoveryError,
    GooseChatError,
    SelectionError,
)

__all__ = [
    "GooseChatError",
    "ConfigLoadError",
    "DiscoveryError",
    "SelectionError",
]
