import pytest

from goosechat.catalog.catalog import Catalog
from goosechat.config import hierarchy
from goosechat.config.environment import Environment

_RELEVANT_MARKERS = (
    "GOOSE",
    "ANTHROPIC",
    "OPENAI",
    "GOOGLE",
    "DATABRICKS",
    "OLLAMA",
    "GENAI",
)

CATALOG_YAML = b"""
providers:
  - name: anthropic
    displayName: Anthropic
    enabled: true
    apiKeyEnv: ANTHROPIC_API_KEY
    models:
      - name: claude-sonnet
        displayName: Claude Sonnet
        enabled: true
      - name: claude-legacy
        enabled: false
  - name: openai
    displayName: OpenAI
    enabled: true
    apiKeyEnv: OPENAI_API_KEY
    baseUrlEnv: OPENAI_HOST
    models:
      - name: gpt-4o
        enabled: true
  - name: retired
    enabled: false
    apiKeyEnv: RETIRED_API_KEY
    models:
      - name: old-model
        enabled: true
  - name: ollama
    displayName: Ollama
    enabled: true
    baseUrlEnv: OLLAMA_HOST
    baseUrl: http://localhost:11434
    models:
      - name: qwen2.5
        enabled: true
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests independent of the developer's shell and config files."""
    import os

    for key in list(os.environ):
        if any(marker in key for marker in _RELEVANT_MARKERS):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def catalog_yaml():
    return CATALOG_YAML


@pytest.fixture
def catalog_file(tmp_path):
    """Write the test catalog to disk and return its path."""
    path = tmp_path / "providers-config.yml"
    path.write_bytes(CATALOG_YAML)
    return path


@pytest.fixture
def make_catalog():
    """Build a catalog from the test YAML over a dict environment."""

    def _make(**env_values: str) -> Catalog:
        return Catalog.load(CATALOG_YAML, Environment(env_values))

    return _make
