"""goosechat: provider resolution and bounded sessions for the Goose agent CLI."""

from goosechat.core import GooseChat
from goosechat.errors import ConfigLoadError, DiscoveryError, GooseChatError, SelectionError
from goosechat.resolver import ConfigSource, ResolvedConfiguration

__version__ = "0.3.0"

__all__ = [
    "ConfigLoadError",
    "ConfigSource",
    "DiscoveryError",
    "GooseChat",
    "GooseChatError",
    "ResolvedConfiguration",
    "SelectionError",
    "__version__",
]
