"""Top-level entry point: GooseChat wires configuration, discovery and the agent."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from goosechat.catalog.catalog import Catalog
from goosechat.catalog.schema import ModelEntry, ProviderSummary
from goosechat.config.environment import Environment
from goosechat.config.hierarchy import load_settings
from goosechat.config.schema import Settings
from goosechat.diagnostics.env import filtered_environment
from goosechat.diagnostics.health import HealthReport, check_health, check_health_async
from goosechat.diagnostics.probes import (
    EndpointTestReport,
    GooseTestReport,
    run_endpoint_test,
    run_goose_self_test,
)
from goosechat.discovery.cache import DiscoveryCache
from goosechat.discovery.locator import ModelLocator, build_locator
from goosechat.errors.exceptions import SelectionError
from goosechat.process.invoker import LineObserver, ProcessInvoker
from goosechat.process.outcome import ProcessOutcome, SpawnFailed
from goosechat.resolver import PrecedenceResolver, ResolvedConfiguration
from goosechat.session import session_arguments, session_environment

logger = logging.getLogger(__name__)


class GooseChat:
    """Main service object with full lifecycle control.

    One instance owns one catalog, one discovery cache and one process pool;
    share it for the lifetime of the process so discovery runs at most once.
    """

    def __init__(
        self,
        env: Environment | None = None,
        settings: Settings | None = None,
        catalog: Catalog | None = None,
        locator: ModelLocator | None = None,
        invoker: ProcessInvoker | None = None,
        **overrides: Any,
    ) -> None:
        self._env = env or Environment()
        self._settings = settings or load_settings(self._env, **overrides)

        self._catalog = catalog or Catalog.load(self._settings.catalog_path, self._env)

        # An injected locator wins over the one described by settings
        self._locator = locator if locator is not None else build_locator(self._settings)
        self._discovery = DiscoveryCache(
            locator=self._locator,
            credential=self._settings.locator_api_key,
            base_url=self._settings.locator_api_base,
            env=self._env,
        )
        self._resolver = PrecedenceResolver(self._discovery, self._env, self._catalog)
        self._invoker = invoker or ProcessInvoker(
            max_concurrent=self._settings.max_processes,
            probe_timeout=self._settings.probe_timeout_seconds,
            env=self._env,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def discovery(self) -> DiscoveryCache:
        return self._discovery

    @property
    def resolver(self) -> PrecedenceResolver:
        return self._resolver

    @property
    def invoker(self) -> ProcessInvoker:
        return self._invoker

    def resolve(self) -> ResolvedConfiguration:
        return self._resolver.resolve()

    def health(self) -> HealthReport:
        return check_health(self._settings, self._invoker, self._resolver)

    async def health_async(self) -> HealthReport:
        return await check_health_async(self._settings, self._invoker, self._resolver)

    def providers(self) -> list[ProviderSummary]:
        return self._catalog.provider_summaries()

    def models(self, provider: str) -> list[ModelEntry]:
        """Enabled models of ``provider``; empty unless it is enabled and credentialed."""
        if self._catalog.provider_config(provider) is None:
            return []
        return self._catalog.models_for_provider(provider)

    def validate(self, provider: str, model: str) -> bool:
        return self._catalog.validate_provider_model(provider, model)

    def environment(self) -> dict[str, str]:
        """Relevant environment variables with secrets masked."""
        return filtered_environment(self._env)

    def run(
        self,
        prompt: str,
        provider: str | None = None,
        model: str | None = None,
        observer: LineObserver | None = None,
    ) -> ProcessOutcome:
        """Run one agent session (sync wrapper)."""
        return asyncio.run(self.run_async(prompt, provider=provider, model=model, observer=observer))

    async def run_async(
        self,
        prompt: str,
        provider: str | None = None,
        model: str | None = None,
        observer: LineObserver | None = None,
    ) -> ProcessOutcome:
        """Run one agent session with the effective provider and model.

        Raises SelectionError if an explicit provider/model is incomplete or
        rejected by the catalog.
        """
        resolved = self._resolve_for_run(provider, model)

        if not self._settings.cli_path:
            return SpawnFailed(reason="GOOSE_CLI_PATH not set")

        logger.info(
            "Starting session with %s/%s (source=%s)",
            resolved.provider,
            resolved.model,
            resolved.source.value,
        )
        return await self._invoker.invoke_async(
            self._settings.cli_path,
            session_arguments(prompt, self._settings.max_turns),
            env_overrides=session_environment(resolved),
            timeout=self._settings.timeout_seconds,
            observer=observer,
        )

    def diagnose_goose(self) -> GooseTestReport:
        return run_goose_self_test(self._settings, self._invoker, self._env)

    def diagnose_endpoint(self, stream: bool = False) -> EndpointTestReport:
        report = run_endpoint_test(
            self._env.get("OPENAI_HOST"),
            self._env.get("OPENAI_API_KEY"),
            self._env.get("GOOSE_MODEL"),
            stream=stream,
        )
        report.service_name = self._env.get("GENAI_SERVICE_NAME")
        return report

    def close(self) -> None:
        close = getattr(self._locator, "close", None)
        if callable(close):
            close()

    def _resolve_for_run(self, provider: str | None, model: str | None) -> ResolvedConfiguration:
        if provider is None and model is None:
            return self._resolver.resolve()
        if provider is None or model is None:
            raise SelectionError(
                "Both provider and model are required for an explicit selection",
                provider=provider,
                model=model,
            )
        return self._resolver.resolve_selection(provider, model)
