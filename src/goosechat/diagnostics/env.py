"""Environment filtering and secret masking for diagnostic display."""

from __future__ import annotations

from goosechat.config.environment import Environment

RELEVANT_PREFIXES = ("GOOSE", "ANTHROPIC", "OPENAI", "GOOGLE", "DATABRICKS", "OLLAMA", "GENAI")
EXACT_MATCHES = ("PATH", "HOME")
SENSITIVE_PATTERNS = ("API_KEY", "TOKEN")

# Sensitive values longer than this are shown as head + "..." + tail
MASK_THRESHOLD = 10
_VISIBLE_HEAD = 10
_VISIBLE_TAIL = 4
_MASK_SEPARATOR = "..."


def is_relevant(key: str) -> bool:
    return key in EXACT_MATCHES or any(p in key for p in RELEVANT_PREFIXES)


def is_sensitive(key: str) -> bool:
    return any(p in key for p in SENSITIVE_PATTERNS)


def mask_if_sensitive(key: str, value: str) -> str:
    if is_sensitive(key) and len(value) > MASK_THRESHOLD:
        return value[:_VISIBLE_HEAD] + _MASK_SEPARATOR + value[-_VISIBLE_TAIL:]
    return value


def filtered_environment(env: Environment | None = None) -> dict[str, str]:
    """Relevant variables, sorted by name, with secrets masked."""
    env = env or Environment()
    return {
        key: mask_if_sensitive(key, value)
        for key, value in sorted(env.items())
        if is_relevant(key)
    }
