"""Tests for provider/model precedence."""

import pytest

from goosechat.config.environment import Environment
from goosechat.discovery.cache import DiscoveredModel, DiscoveryCache
from goosechat.errors.exceptions import SelectionError
from goosechat.resolver import ConfigSource, PrecedenceResolver


class FixedDiscovery:
    """Discovery stand-in returning a fixed answer and counting calls."""

    def __init__(self, model=None):
        self.model = model
        self.calls = 0

    def get_model_info(self):
        self.calls += 1
        return self.model


DISCOVERED = DiscoveredModel(
    model="openai/gpt-5",
    credential="genai-key",
    base_url="https://proxy.example.com/openai",
)


def _resolver(env=None, discovered=None, catalog=None):
    return PrecedenceResolver(FixedDiscovery(discovered), Environment(env or {}), catalog)


class TestResolve:
    def test_discovered_wins_over_everything(self):
        env = {
            "GOOSE_PROVIDER__TYPE": "anthropic",
            "GOOSE_PROVIDER__MODEL": "claude-sonnet",
            "ANTHROPIC_API_KEY": "sk-ant",
        }
        resolved = _resolver(env, DISCOVERED).resolve()
        assert resolved.provider == "openai"
        assert resolved.model == "openai/gpt-5"
        assert resolved.source == ConfigSource.DISCOVERED
        assert resolved.base_url == "https://proxy.example.com/openai"
        assert resolved.credential == "genai-key"

    def test_nested_variables_beat_flat(self):
        env = {
            "GOOSE_PROVIDER__TYPE": "databricks",
            "GOOSE_PROVIDER": "anthropic",
            "GOOSE_PROVIDER__MODEL": "dbrx",
            "GOOSE_MODEL": "claude-sonnet",
        }
        resolved = _resolver(env).resolve()
        assert (resolved.provider, resolved.model) == ("databricks", "dbrx")
        assert resolved.source == ConfigSource.ENVIRONMENT

    def test_flat_variables(self):
        env = {"GOOSE_PROVIDER": "google", "GOOSE_MODEL": "gemini-2.5-pro"}
        resolved = _resolver(env).resolve()
        assert (resolved.provider, resolved.model) == ("google", "gemini-2.5-pro")

    def test_empty_nested_falls_through_to_flat(self):
        env = {"GOOSE_PROVIDER__TYPE": "", "GOOSE_PROVIDER": "google"}
        assert _resolver(env).resolve().provider == "google"

    def test_model_only_override(self):
        env = {"GOOSE_MODEL": "gpt-4o", "OPENAI_API_KEY": "sk-oa"}
        resolved = _resolver(env).resolve()
        assert (resolved.provider, resolved.model) == ("openai", "gpt-4o")

    def test_defaults(self):
        resolved = _resolver().resolve()
        assert (resolved.provider, resolved.model) == ("unknown", "default")
        assert resolved.source == ConfigSource.ENVIRONMENT

    def test_one_discovery_call_per_resolve(self):
        discovery = FixedDiscovery(DISCOVERED)
        PrecedenceResolver(discovery, Environment({})).resolve()
        assert discovery.calls == 1

    def test_catalog_supplies_credential_and_base_url(self, make_catalog):
        env = {"GOOSE_PROVIDER": "openai", "OPENAI_API_KEY": "sk-oa", "OPENAI_HOST": "https://h"}
        catalog = make_catalog(**env)
        resolved = _resolver(env, catalog=catalog).resolve()
        assert resolved.credential == "sk-oa"
        assert resolved.base_url == "https://h"

    def test_credential_excluded_from_dump(self):
        dumped = _resolver(discovered=DISCOVERED).resolve().model_dump()
        assert "credential" not in dumped
        assert dumped["provider"] == "openai"


class TestInference:
    @pytest.mark.parametrize(
        ("env", "expected"),
        [
            ({"ANTHROPIC_API_KEY": "a", "OPENAI_API_KEY": "o"}, "anthropic"),
            ({"OPENAI_API_KEY": "o", "GOOGLE_API_KEY": "g"}, "openai"),
            ({"GOOGLE_API_KEY": "g", "DATABRICKS_HOST": "d"}, "google"),
            ({"DATABRICKS_HOST": "d", "OLLAMA_HOST": "o"}, "databricks"),
            ({"OLLAMA_HOST": "http://localhost:11434"}, "ollama"),
            ({"ANTHROPIC_API_KEY": ""}, "unknown"),
            ({}, "unknown"),
        ],
    )
    def test_inference_order(self, env, expected):
        assert _resolver(env).infer_provider_from_credentials() == expected


class TestSingleFieldQueries:
    def test_with_discovery(self):
        resolver = _resolver({"GOOSE_PROVIDER": "anthropic"}, DISCOVERED)
        assert resolver.resolve_provider() == "openai"
        assert resolver.resolve_model() == "openai/gpt-5"
        assert resolver.resolve_source() == ConfigSource.DISCOVERED

    def test_without_discovery(self):
        resolver = _resolver({"GOOSE_PROVIDER": "anthropic", "GOOSE_MODEL": "claude-sonnet"})
        assert resolver.resolve_provider() == "anthropic"
        assert resolver.resolve_model() == "claude-sonnet"
        assert resolver.resolve_source() == ConfigSource.ENVIRONMENT

    def test_with_real_cache_and_bypass(self):
        class Locator:
            def get_model_names_by_capability(self, capability):
                return ["openai/gpt-5"]

        env = Environment({"BYPASS_GENAI": "true", "GOOSE_PROVIDER": "anthropic"})
        resolver = PrecedenceResolver(DiscoveryCache(locator=Locator(), env=env), env)
        assert resolver.resolve().provider == "anthropic"


class TestResolveSelection:
    def test_valid_selection(self, make_catalog):
        catalog = make_catalog(ANTHROPIC_API_KEY="sk-ant")
        resolver = _resolver({"ANTHROPIC_API_KEY": "sk-ant"}, catalog=catalog)
        resolved = resolver.resolve_selection("anthropic", "claude-sonnet")
        assert (resolved.provider, resolved.model) == ("anthropic", "claude-sonnet")
        assert resolved.credential == "sk-ant"

    def test_invalid_selection_raises(self, make_catalog):
        resolver = _resolver(catalog=make_catalog())
        with pytest.raises(SelectionError) as exc_info:
            resolver.resolve_selection("anthropic", "claude-sonnet")
        assert exc_info.value.provider == "anthropic"
        assert exc_info.value.model == "claude-sonnet"

    def test_without_catalog_raises(self):
        with pytest.raises(SelectionError):
            _resolver().resolve_selection("anthropic", "claude-sonnet")

    def test_discovered_overrides_selection(self, make_catalog):
        resolver = _resolver(discovered=DISCOVERED, catalog=make_catalog())
        resolved = resolver.resolve_selection("anthropic", "claude-sonnet")
        assert resolved.source == ConfigSource.DISCOVERED
        assert resolved.model == "openai/gpt-5"
