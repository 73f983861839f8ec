"""Provider catalog: the process-lifetime table of providers and models."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from goosechat.catalog.schema import ModelEntry, ProviderEntry, ProviderSummary
from goosechat.config.environment import Environment
from goosechat.errors.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

_PROVIDERS_YAML = Path(__file__).parent / "providers-config.yml"

# Locally hosted; needs a host, not an API key
OLLAMA_PROVIDER = "ollama"


class Catalog:
    """Immutable provider/model catalog with credential-aware queries.

    Credentials and base URLs are resolved against ``env`` on every query, so
    availability follows the environment while the catalog itself never
    changes after construction.
    """

    def __init__(
        self,
        providers: Iterable[ProviderEntry] = (),
        env: Environment | None = None,
    ) -> None:
        self._env = env or Environment()
        self._by_name: dict[str, ProviderEntry] = {}
        for provider in providers:
            if provider.name in self._by_name:
                logger.warning(
                    "Duplicate provider '%s' in catalog, keeping the first definition",
                    provider.name,
                )
                continue
            self._by_name[provider.name] = provider
        self._providers = tuple(self._by_name.values())

    @classmethod
    def load(
        cls,
        source: str | Path | bytes | None = None,
        env: Environment | None = None,
    ) -> Catalog:
        """Load a catalog from a YAML path or raw YAML bytes.

        Never raises: any read or parse failure yields an empty catalog.
        """
        label = "<bytes>" if isinstance(source, bytes) else str(source or _PROVIDERS_YAML)
        try:
            providers = parse_catalog(_read_source(source), label)
        except ConfigLoadError as e:
            logger.warning("Failed to load provider catalog from %s: %s", label, e)
            return cls((), env)

        catalog = cls(providers, env)
        logger.info("Loaded %d providers from %s", len(catalog), label)
        return catalog

    @property
    def providers(self) -> tuple[ProviderEntry, ...]:
        """All providers in catalog order, enabled or not."""
        return self._providers

    def get(self, name: str) -> ProviderEntry | None:
        return self._by_name.get(name)

    def has_credential(self, provider: ProviderEntry) -> bool:
        """Whether the environment holds what this provider needs to connect."""
        if provider.name == OLLAMA_PROVIDER:
            if provider.base_url_env_var:
                return self._env.is_set(provider.base_url_env_var)
            return True  # falls back to the default local host

        if not provider.credential_env_var:
            return False
        return self._env.is_set(provider.credential_env_var)

    def available_providers(self) -> list[ProviderEntry]:
        """Enabled providers whose credentials are present."""
        return [p for p in self._providers if p.enabled and self.has_credential(p)]

    def models_for_provider(self, name: str) -> list[ModelEntry]:
        """Enabled models of an enabled provider, in catalog order."""
        provider = self._by_name.get(name)
        if provider is None or not provider.enabled:
            return []
        return provider.enabled_models

    def provider_config(self, name: str) -> ProviderEntry | None:
        """The provider if it exists, is enabled and credentialed."""
        provider = self._by_name.get(name)
        if provider is None or not provider.enabled or not self.has_credential(provider):
            return None
        return provider

    def validate_provider_model(self, provider: str | None, model: str | None) -> bool:
        if not provider or not model:
            return False

        config = self.provider_config(provider)
        if config is None:
            return False

        return any(m.name == model for m in config.enabled_models)

    def resolve_credential(self, provider: str) -> str | None:
        """API key for a provider from its credential variable."""
        config = self._by_name.get(provider)
        if config is None or not config.credential_env_var:
            return None

        value = self._env.get(config.credential_env_var)
        if value is None:
            logger.debug(
                "Credential variable %s not set for provider %s",
                config.credential_env_var,
                provider,
            )
        return value

    def resolve_base_url(self, provider: str) -> str | None:
        """Base URL override for a provider; None means the provider default."""
        config = self._by_name.get(provider)
        if config is None:
            return None

        if config.base_url_env_var:
            value = self._env.get(config.base_url_env_var)
            if value:
                return value

        return config.base_url or None

    def provider_summaries(self) -> list[ProviderSummary]:
        return [
            ProviderSummary(
                name=p.name,
                display_name=p.display_name or p.name,
                model_count=len(p.enabled_models),
            )
            for p in self.available_providers()
        ]

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[ProviderEntry]:
        return iter(self._providers)


def parse_catalog(raw: Any, label: str = "<catalog>") -> list[ProviderEntry]:
    """Validate a parsed YAML document into provider entries.

    Raises ConfigLoadError on a malformed document.
    """
    if raw is None:
        return []
    if not isinstance(raw, dict):
        raise ConfigLoadError(
            f"Expected YAML mapping, got {type(raw).__name__} in {label}", source=label
        )

    providers = raw.get("providers")
    if providers is None:
        return []
    if not isinstance(providers, list):
        raise ConfigLoadError(f"'providers' must be a list in {label}", source=label)

    try:
        return [ProviderEntry.model_validate(p) for p in providers]
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid provider entry in {label}: {e}", source=label, original=e) from e


def _read_source(source: str | Path | bytes | None) -> Any:
    """Parse YAML from bytes or a file path."""
    if isinstance(source, bytes):
        text = source.decode("utf-8", errors="replace")
        label = "<bytes>"
    else:
        path = Path(source) if source is not None else _PROVIDERS_YAML
        label = str(path)
        if not path.is_file():
            raise ConfigLoadError(f"Provider catalog not found: {path}", source=label)
        try:
            text = path.read_text()
        except OSError as e:
            raise ConfigLoadError(str(e), source=label, original=e) from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Malformed YAML in {label}: {e}", source=label, original=e) from e
