"""Read-only view over environment variables.

Every component reads the environment through an ``Environment`` so tests can
hand in a plain dict instead of mutating ``os.environ``. An empty value reads
exactly like an unset one.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping

_TRUTHY = {"1", "true", "yes", "on"}


class Environment:
    """Environment variable source backed by a mapping.

    Defaults to the live ``os.environ``, so values are re-read on every call.
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: Mapping[str, str] = os.environ if values is None else values

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or None if unset or empty."""
        value = self._values.get(name)
        return value if value else None

    def is_set(self, name: str) -> bool:
        return self.get(name) is not None

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get(name)
        if value is None:
            return default
        return value.strip().lower() in _TRUTHY

    def items(self) -> Iterator[tuple[str, str]]:
        """All variables, including empty ones."""
        return iter(list(self._values.items()))
