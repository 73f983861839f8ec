"""Discovery cache: lazily discovers one GenAI model and memoizes it.

When the service is bound to a GenAI offering, a locator can list the models
it advertises. The first request picks a TOOLS-capable model; every later
request reuses that answer for the rest of the process lifetime, including a
"nothing found" answer.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from goosechat.config.environment import Environment
from goosechat.config.schema import Settings
from goosechat.discovery.locator import TOOLS_CAPABILITY, ModelLocator, build_locator
from goosechat.discovery.once import ResolveOnce, ResolveState
from goosechat.discovery.urls import normalize_base_url

logger = logging.getLogger(__name__)

BYPASS_ENV_VAR = "BYPASS_GENAI"


class DiscoveredModel(BaseModel):
    """A model provisioned by the GenAI service, exposed over the OpenAI wire format."""

    model_config = ConfigDict(frozen=True)

    model: str
    credential: str | None = Field(default=None, repr=False)
    base_url: str | None = None


class DiscoveryCache:
    """Memoizes the locator's answer; the bypass flag is checked on every call."""

    def __init__(
        self,
        locator: ModelLocator | None = None,
        credential: str | None = None,
        base_url: str | None = None,
        env: Environment | None = None,
    ) -> None:
        self._locator = locator
        self._credential = credential or None
        self._base_url = base_url or None
        self._env = env or Environment()
        self._once: ResolveOnce[DiscoveredModel] = ResolveOnce(self._discover)

        if locator is not None:
            logger.info("Model locator available; discovery runs on first request")
        else:
            logger.info("No model locator; using environment-configured model")

    @classmethod
    def from_settings(cls, settings: Settings, env: Environment | None = None) -> DiscoveryCache:
        return cls(
            locator=build_locator(settings),
            credential=settings.locator_api_key,
            base_url=settings.locator_api_base,
            env=env,
        )

    @property
    def state(self) -> ResolveState:
        return self._once.state

    def is_locator_available(self) -> bool:
        """Whether a locator is configured. Does not trigger discovery."""
        return self._locator is not None

    def bypassed(self) -> bool:
        return self._env.get_bool(BYPASS_ENV_VAR)

    def get_model_info(self) -> DiscoveredModel | None:
        """The discovered model, or None if bypassed or nothing was found."""
        if self.bypassed():
            logger.debug("%s is set, skipping model discovery", BYPASS_ENV_VAR)
            return None
        return self._once.get()

    def _discover(self) -> DiscoveredModel | None:
        if self._locator is None:
            logger.debug("No model locator, skipping discovery")
            return None

        logger.info(
            "Discovering GenAI models (credential present: %s, base URL present: %s)",
            self._credential is not None,
            self._base_url is not None,
        )
        try:
            names = self._locator.get_model_names_by_capability(TOOLS_CAPABILITY)
        except Exception as e:
            logger.warning("Failed to discover GenAI model: %s", e)
            logger.debug("Model discovery error details", exc_info=True)
            return None

        if not names:
            logger.warning("No %s-capable models found in GenAI service", TOOLS_CAPABILITY)
            return None

        model = names[0]
        logger.info(
            "Discovered GenAI model: %s (from %d %s-capable models)",
            model,
            len(names),
            TOOLS_CAPABILITY,
        )

        base_url = normalize_base_url(self._base_url, model) if self._base_url else None
        discovered = DiscoveredModel(model=model, credential=self._credential, base_url=base_url)
        logger.info(
            "GenAI model configuration: model=%s, base_url=%s, credential_length=%d",
            discovered.model,
            discovered.base_url,
            len(discovered.credential or ""),
        )
        return discovered
