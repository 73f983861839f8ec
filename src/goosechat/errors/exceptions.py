"""Custom exception hierarchy for goosechat."""

from __future__ import annotations

from typing import Any


class GooseChatError(Exception):
    """Base exception for all goosechat errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class ConfigLoadError(GooseChatError):
    """A configuration document could not be read or validated.

    Examples: missing catalog file, malformed YAML, wrong document shape.
    Catalog loading recovers from this to an empty catalog.
    """

    def __init__(
        self,
        message: str = "",
        source: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.original = original


class DiscoveryError(GooseChatError):
    """The model locator could not be queried.

    Examples: config endpoint unreachable, non-2xx response, unparseable body.
    The discovery cache absorbs this and resolves to "no discovered model".
    """

    def __init__(
        self,
        message: str = "",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.original = original


class SelectionError(GooseChatError):
    """An explicit provider/model selection was rejected."""

    def __init__(
        self,
        message: str = "",
        provider: str | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.model = model
