"""Health report for the agent executable and the effective configuration."""

from __future__ import annotations

from pydantic import BaseModel

from goosechat.config.schema import Settings
from goosechat.process.invoker import ProcessInvoker, version_line
from goosechat.process.outcome import Completed
from goosechat.resolver import ConfigSource, PrecedenceResolver, ResolvedConfiguration

NOT_CONFIGURED_MESSAGE = (
    "Goose CLI is not configured. "
    "Please ensure GOOSE_CLI_PATH and an LLM provider API key are set."
)


class HealthReport(BaseModel):
    available: bool
    version: str
    provider: str
    model: str
    source: ConfigSource
    message: str


def check_health(
    settings: Settings,
    invoker: ProcessInvoker,
    resolver: PrecedenceResolver,
) -> HealthReport:
    """Run ``--version`` once and report it alongside the resolved configuration."""
    resolved = resolver.resolve()
    if not settings.cli_path:
        return _not_configured(resolved)
    return _report(resolved, invoker.check_version(settings.cli_path))


async def check_health_async(
    settings: Settings,
    invoker: ProcessInvoker,
    resolver: PrecedenceResolver,
) -> HealthReport:
    resolved = resolver.resolve()
    if not settings.cli_path:
        return _not_configured(resolved)
    return _report(resolved, await invoker.check_version_async(settings.cli_path))


def _not_configured(resolved: ResolvedConfiguration) -> HealthReport:
    return HealthReport(
        available=False,
        version="not configured",
        provider=resolved.provider,
        model=resolved.model,
        source=resolved.source,
        message=NOT_CONFIGURED_MESSAGE,
    )


def _report(resolved: ResolvedConfiguration, outcome: Completed | None) -> HealthReport:
    available = outcome is not None
    if available:
        version = version_line(outcome.output) or "unknown"
    else:
        version = "unavailable"
    return HealthReport(
        available=available,
        version=version,
        provider=resolved.provider,
        model=resolved.model,
        source=resolved.source,
        message=(
            "Goose CLI is ready" if available else "Goose CLI binary not found or not configured"
        ),
    )
