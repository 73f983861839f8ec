"""Argument vector and environment overlay for one agent session."""

from __future__ import annotations

from goosechat.resolver import DEFAULT_MODEL, UNKNOWN_PROVIDER, ConfigSource, ResolvedConfiguration


def session_arguments(prompt: str, max_turns: int) -> list[str]:
    return ["run", "--text", prompt, "--max-turns", str(max_turns)]


def session_environment(resolved: ResolvedConfiguration) -> dict[str, str]:
    """Variables layered over the inherited environment for the child process.

    A discovered model is reached through the OpenAI-compatible endpoint, so
    its base URL and credential are handed over as OPENAI_HOST and
    OPENAI_API_KEY. Environment-sourced credentials are already inherited.
    The placeholder model and provider are left out so the agent applies
    its own defaults.
    """
    overlay: dict[str, str] = {}
    if resolved.model != DEFAULT_MODEL:
        overlay["GOOSE_MODEL"] = resolved.model
    if resolved.provider != UNKNOWN_PROVIDER:
        overlay["GOOSE_PROVIDER"] = resolved.provider

    if resolved.source is ConfigSource.DISCOVERED:
        if resolved.base_url:
            overlay["OPENAI_HOST"] = resolved.base_url
        if resolved.credential:
            overlay["OPENAI_API_KEY"] = resolved.credential
    return overlay
