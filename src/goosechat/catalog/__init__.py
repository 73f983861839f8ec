"""Provider catalog: providers, models and credential availability."""

from goosechat.catalog.catalog import OLLAMA_PROVIDER, Catalog, parse_catalog
from goosechat.catalog.schema import ModelEntry, ProviderEntry, ProviderSummary

__all__ = [
    "Catalog",
    "ModelEntry",
    "ProviderEntry",
    "ProviderSummary",
    "OLLAMA_PROVIDER",
    "parse_catalog",
]
