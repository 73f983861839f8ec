"""Click CLI for goosechat: inspect provider configuration and run Goose sessions."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from goosechat.config.hierarchy import load_settings
from goosechat.config.schema import Settings
from goosechat.errors.exceptions import ConfigLoadError, SelectionError
from goosechat.process.outcome import Completed, SpawnFailed, TimedOut

if TYPE_CHECKING:
    from goosechat.core import GooseChat

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging from -v flags, falling back to the configured level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="goosechat")
@click.option(
    "--catalog",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Provider catalog YAML (defaults to the bundled one).",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, catalog: str | None, verbose: int) -> None:
    """goosechat: Goose agent sessions with resolved provider configuration."""
    try:
        settings = load_settings(catalog_path=catalog)
    except ConfigLoadError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    _setup_logging(verbose, settings.log_level)
    ctx.obj = settings


def _service(ctx: click.Context) -> GooseChat:
    from goosechat.core import GooseChat

    settings: Settings = ctx.obj
    service = GooseChat(settings=settings)
    ctx.call_on_close(service.close)
    return service


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check the Goose executable and show the effective configuration."""
    report = _service(ctx).health()

    table = Table(title="Goose Health", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Available", "[green]yes[/green]" if report.available else "[red]no[/red]")
    table.add_row("Version", report.version)
    table.add_row("Provider", report.provider)
    table.add_row("Model", report.model)
    table.add_row("Source", report.source.value)
    console.print(table)
    console.print(report.message)

    if not report.available:
        sys.exit(1)


@cli.command()
@click.pass_context
def resolve(ctx: click.Context) -> None:
    """Show the provider and model a session would use."""
    resolved = _service(ctx).resolve()

    table = Table(title="Resolved Configuration", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Provider", resolved.provider)
    table.add_row("Model", resolved.model)
    table.add_row("Source", resolved.source.value)
    table.add_row("Base URL", resolved.base_url or "-")
    table.add_row("Credential", "present" if resolved.credential else "absent")
    console.print(table)


@cli.command("providers")
@click.pass_context
def list_providers(ctx: click.Context) -> None:
    """List enabled providers whose credentials are available."""
    summaries = _service(ctx).providers()
    if not summaries:
        error_console.print("[yellow]No providers available. Set a provider API key.[/yellow]")
        return

    table = Table(title="Available Providers", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    table.add_column("Models")
    for summary in summaries:
        table.add_row(summary.name, summary.display_name, str(summary.model_count))
    console.print(table)


@cli.command("models")
@click.argument("provider")
@click.pass_context
def list_models(ctx: click.Context, provider: str) -> None:
    """List enabled models of PROVIDER if it is enabled and credentialed."""
    models = _service(ctx).models(provider)
    if not models:
        error_console.print(
            f"[yellow]Provider '{provider}' is not available "
            "(unknown, disabled or missing credentials).[/yellow]"
        )
        sys.exit(1)

    table = Table(title=f"Models for {provider}", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    for model in models:
        table.add_row(model.name, model.display_name or "-")
    console.print(table)


@cli.command()
@click.argument("provider")
@click.argument("model")
@click.pass_context
def validate(ctx: click.Context, provider: str, model: str) -> None:
    """Check that PROVIDER and MODEL are enabled and credentialed."""
    if _service(ctx).validate(provider, model):
        console.print(f"[green]Valid:[/green] {provider}/{model}")
    else:
        error_console.print(f"[red]Invalid or unavailable:[/red] {provider}/{model}")
        sys.exit(1)


@cli.command("env")
@click.pass_context
def show_env(ctx: click.Context) -> None:
    """Show relevant environment variables with secrets masked."""
    table = Table(title="Environment", show_header=True)
    table.add_column("Variable", style="cyan")
    table.add_column("Value", overflow="fold")
    for key, value in _service(ctx).environment().items():
        table.add_row(key, value)
    console.print(table)


@cli.command()
@click.argument("prompt")
@click.option("--provider", type=str, default=None, help="Explicit provider (requires --model).")
@click.option("--model", type=str, default=None, help="Explicit model (requires --provider).")
@click.pass_context
def run(ctx: click.Context, prompt: str, provider: str | None, model: str | None) -> None:
    """Run one Goose session with PROMPT, streaming its output."""
    service = _service(ctx)

    try:
        outcome = service.run(
            prompt,
            provider=provider,
            model=model,
            observer=lambda line: console.print(line, markup=False, highlight=False),
        )
    except SelectionError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if isinstance(outcome, SpawnFailed):
        error_console.print(f"[red]Could not start Goose:[/red] {outcome.reason}")
        sys.exit(1)
    if isinstance(outcome, TimedOut):
        error_console.print(
            f"[red]Goose timed out after {outcome.timeout_seconds:.0f} seconds.[/red]"
        )
        sys.exit(1)
    if isinstance(outcome, Completed) and not outcome.success:
        error_console.print(f"[red]Goose exited with code {outcome.exit_code}.[/red]")
        sys.exit(outcome.exit_code)


@cli.group()
def diagnose() -> None:
    """Direct tests of the Goose executable and the model endpoint."""


@diagnose.command("goose")
@click.pass_context
def diagnose_goose(ctx: click.Context) -> None:
    """Run a one-turn Goose session."""
    report = _service(ctx).diagnose_goose()

    table = Table(title="Goose Self-Test", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("Goose path", report.goose_path or "-")
    table.add_row("Provider", report.provider or "-")
    table.add_row("Model", report.model or "-")
    table.add_row("OpenAI host", report.openai_host or "-")
    table.add_row("Success", "[green]yes[/green]" if report.success else "[red]no[/red]")
    if report.exit_code is not None:
        table.add_row("Exit code", str(report.exit_code))
    if report.error:
        table.add_row("Error", report.error)
    console.print(table)

    output = report.output or report.partial_output
    if output:
        console.print(output, markup=False, highlight=False)

    if not report.success:
        sys.exit(1)


@diagnose.command("endpoint")
@click.option("--stream", is_flag=True, default=False, help="Use a streaming completion.")
@click.pass_context
def diagnose_endpoint(ctx: click.Context, stream: bool) -> None:
    """Send one chat completion straight to OPENAI_HOST."""
    report = _service(ctx).diagnose_endpoint(stream=stream)

    table = Table(title="Endpoint Test", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("Model", report.model or "-")
    table.add_row("Test URL", report.test_url or "-")
    table.add_row("API key", f"{report.api_key_prefix or '-'} ({report.api_key_length} chars)")
    if report.service_name:
        table.add_row("Service", report.service_name)
    table.add_row("Stream", "yes" if report.stream else "no")
    table.add_row("Success", "[green]yes[/green]" if report.success else "[red]no[/red]")
    if report.chunk_count is not None:
        table.add_row("Chunks", str(report.chunk_count))
    if report.response is not None:
        table.add_row("Response", report.response)
    if report.error:
        table.add_row("Error", report.error)
    console.print(table)

    if not report.success:
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli()
