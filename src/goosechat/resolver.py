"""Precedence resolver: the effective provider and model for a session.

Precedence (first match wins):
  1. Discovered GenAI model (always exposed as the OpenAI-compatible provider)
  2. Nested-style variables (GOOSE_PROVIDER__TYPE / GOOSE_PROVIDER__MODEL)
  3. Flat-style variables (GOOSE_PROVIDER / GOOSE_MODEL)
  4. Provider inferred from the first credential variable present
  5. "unknown" provider / "default" model
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from goosechat.catalog.catalog import Catalog
from goosechat.config.environment import Environment
from goosechat.discovery.cache import DiscoveredModel, DiscoveryCache
from goosechat.errors.exceptions import SelectionError

logger = logging.getLogger(__name__)

# Discovered models speak the OpenAI wire protocol whatever the vendor
SENTINEL_PROVIDER = "openai"
UNKNOWN_PROVIDER = "unknown"
DEFAULT_MODEL = "default"

PROVIDER_ENV_VARS = ("GOOSE_PROVIDER__TYPE", "GOOSE_PROVIDER")
MODEL_ENV_VARS = ("GOOSE_PROVIDER__MODEL", "GOOSE_MODEL")

# Checked in order; the first variable set names the provider
CREDENTIAL_INFERENCE: tuple[tuple[str, str], ...] = (
    ("ANTHROPIC_API_KEY", "anthropic"),
    ("OPENAI_API_KEY", "openai"),
    ("GOOGLE_API_KEY", "google"),
    ("DATABRICKS_HOST", "databricks"),
    ("OLLAMA_HOST", "ollama"),
)


class ConfigSource(StrEnum):
    DISCOVERED = "discovered"
    ENVIRONMENT = "environment"


class ResolvedConfiguration(BaseModel):
    """Effective configuration for one resolution. Never cached."""

    model_config = ConfigDict(frozen=True)

    provider: str
    model: str
    source: ConfigSource
    base_url: str | None = None
    credential: str | None = Field(default=None, repr=False, exclude=True)


class PrecedenceResolver:
    """Combines discovery, environment overrides and credential inference."""

    def __init__(
        self,
        discovery: DiscoveryCache,
        env: Environment | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self._discovery = discovery
        self._env = env or Environment()
        self._catalog = catalog

    def resolve(self) -> ResolvedConfiguration:
        """Resolve provider, model and source from one discovery snapshot."""
        discovered = self._discovery.get_model_info()
        if discovered is not None:
            return self._from_discovery(discovered)

        provider = self._provider_from_env()
        return ResolvedConfiguration(
            provider=provider,
            model=self._model_from_env(),
            source=ConfigSource.ENVIRONMENT,
            base_url=self._catalog.resolve_base_url(provider) if self._catalog else None,
            credential=self._catalog.resolve_credential(provider) if self._catalog else None,
        )

    def resolve_selection(self, provider: str, model: str) -> ResolvedConfiguration:
        """Apply an explicit provider/model choice.

        A discovered model still takes precedence. Otherwise the choice must
        name an enabled, credentialed provider and one of its enabled models.

        Raises SelectionError if the catalog rejects the choice.
        """
        discovered = self._discovery.get_model_info()
        if discovered is not None:
            logger.info(
                "Ignoring selection %s/%s: discovered model %s is in effect",
                provider,
                model,
                discovered.model,
            )
            return self._from_discovery(discovered)

        if self._catalog is None or not self._catalog.validate_provider_model(provider, model):
            raise SelectionError(
                f"Invalid or unavailable provider/model: {provider}/{model}",
                provider=provider,
                model=model,
            )

        return ResolvedConfiguration(
            provider=provider,
            model=model,
            source=ConfigSource.ENVIRONMENT,
            base_url=self._catalog.resolve_base_url(provider),
            credential=self._catalog.resolve_credential(provider),
        )

    def resolve_provider(self) -> str:
        discovered = self._discovery.get_model_info()
        if discovered is not None:
            return SENTINEL_PROVIDER
        return self._provider_from_env()

    def resolve_model(self) -> str:
        discovered = self._discovery.get_model_info()
        if discovered is not None:
            return discovered.model
        return self._model_from_env()

    def resolve_source(self) -> ConfigSource:
        if self._discovery.get_model_info() is not None:
            return ConfigSource.DISCOVERED
        return ConfigSource.ENVIRONMENT

    def infer_provider_from_credentials(self) -> str:
        for env_var, provider in CREDENTIAL_INFERENCE:
            if self._env.is_set(env_var):
                return provider
        return UNKNOWN_PROVIDER

    def _from_discovery(self, discovered: DiscoveredModel) -> ResolvedConfiguration:
        return ResolvedConfiguration(
            provider=SENTINEL_PROVIDER,
            model=discovered.model,
            source=ConfigSource.DISCOVERED,
            base_url=discovered.base_url,
            credential=discovered.credential,
        )

    def _provider_from_env(self) -> str:
        for env_var in PROVIDER_ENV_VARS:
            value = self._env.get(env_var)
            if value is not None:
                return value
        return self.infer_provider_from_credentials()

    def _model_from_env(self) -> str:
        for env_var in MODEL_ENV_VARS:
            value = self._env.get(env_var)
            if value is not None:
                return value
        return DEFAULT_MODEL
