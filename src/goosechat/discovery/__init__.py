"""GenAI model discovery: locator, single-flight cache and URL normalization."""

from goosechat.discovery.cache import BYPASS_ENV_VAR, DiscoveredModel, DiscoveryCache
from goosechat.discovery.locator import TOOLS_CAPABILITY, HttpLocator, ModelLocator, build_locator
from goosechat.discovery.once import ResolveOnce, ResolveState
from goosechat.discovery.urls import normalize_base_url

__all__ = [
    "BYPASS_ENV_VAR",
    "DiscoveredModel",
    "DiscoveryCache",
    "HttpLocator",
    "ModelLocator",
    "ResolveOnce",
    "ResolveState",
    "TOOLS_CAPABILITY",
    "build_locator",
    "normalize_base_url",
]
