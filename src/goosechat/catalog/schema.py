"""Provider and model records loaded from providers-config.yml."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelEntry(BaseModel):
    """A named model offered by a provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str = Field(default="", alias="displayName")
    enabled: bool = False


class ProviderEntry(BaseModel):
    """An upstream LLM provider and its models.

    ``credential_env_var`` and ``base_url_env_var`` name environment variables;
    their values are looked up at query time, never stored here.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str = Field(default="", alias="displayName")
    enabled: bool = False
    credential_env_var: str | None = Field(default=None, alias="apiKeyEnv")
    base_url: str | None = Field(default=None, alias="baseUrl")
    base_url_env_var: str | None = Field(default=None, alias="baseUrlEnv")
    models: tuple[ModelEntry, ...] = ()

    @field_validator("models", mode="before")
    @classmethod
    def _null_models(cls, value: object) -> object:
        return () if value is None else value

    @property
    def enabled_models(self) -> list[ModelEntry]:
        return [m for m in self.models if m.enabled]


class ProviderSummary(BaseModel):
    """Provider listing without credentials."""

    name: str
    display_name: str
    model_count: int
