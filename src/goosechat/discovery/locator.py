"""Model locators: list model identifiers by capability tag."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from goosechat.config.schema import Settings
from goosechat.errors.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

# Required for agentic tool calling
TOOLS_CAPABILITY = "TOOLS"


class ModelLocator(Protocol):
    """Anything that can list model names advertising a capability."""

    def get_model_names_by_capability(self, capability: str) -> list[str]: ...


class HttpLocator:
    """Reads a GenAI service config endpoint over HTTP.

    Expects a JSON document of the form::

        {"advertisedModels": [{"name": "...", "capabilities": ["TOOLS", ...]}]}

    Model order in the document is preserved.
    """

    def __init__(
        self,
        config_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._config_url = config_url
        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)

    def get_model_names_by_capability(self, capability: str) -> list[str]:
        """Names of advertised models carrying ``capability``.

        Raises DiscoveryError if the endpoint cannot be read.
        """
        payload = self._fetch_config()
        models = payload.get("advertisedModels") or []
        if not isinstance(models, list):
            raise DiscoveryError("'advertisedModels' is not a list")

        names = [
            m["name"]
            for m in models
            if isinstance(m, dict) and m.get("name") and capability in (m.get("capabilities") or [])
        ]
        logger.debug(
            "Locator lists %d models, %d with capability %s", len(models), len(names), capability
        )
        return names

    def close(self) -> None:
        self._client.close()

    def _fetch_config(self) -> dict[str, Any]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = self._client.get(self._config_url, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise DiscoveryError(
                f"Locator config endpoint returned {e.response.status_code}",
                http_status=e.response.status_code,
                original=e,
            ) from e
        except httpx.HTTPError as e:
            raise DiscoveryError(f"Locator config endpoint unreachable: {e}", original=e) from e
        except ValueError as e:
            raise DiscoveryError(f"Locator config is not valid JSON: {e}", original=e) from e

        if not isinstance(payload, dict):
            raise DiscoveryError(f"Expected JSON object, got {type(payload).__name__}")
        return payload


def build_locator(settings: Settings) -> HttpLocator | None:
    """HTTP locator from settings, or None when no config URL is set."""
    if not settings.locator_configured:
        return None
    return HttpLocator(
        settings.locator_config_url,
        api_key=settings.locator_api_key,
        timeout=settings.locator_timeout_seconds,
    )
