"""Tests for the HTTP model locator."""

import httpx
import pytest

from goosechat.config.schema import Settings
from goosechat.discovery.locator import TOOLS_CAPABILITY, HttpLocator, build_locator
from goosechat.errors.exceptions import DiscoveryError

CONFIG_URL = "https://genai.example.com/config/v1/endpoint"

ADVERTISED = {
    "advertisedModels": [
        {"name": "embedder-small", "capabilities": ["EMBEDDING"]},
        {"name": "openai/gpt-5", "capabilities": ["CHAT", "TOOLS"]},
        {"name": "llama-tools", "capabilities": ["TOOLS"]},
        {"name": "no-caps"},
    ]
}


def _locator(handler, api_key=None):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpLocator(CONFIG_URL, api_key=api_key, client=client)


class TestHttpLocator:
    def test_filters_by_capability_in_order(self):
        locator = _locator(lambda request: httpx.Response(200, json=ADVERTISED))
        names = locator.get_model_names_by_capability(TOOLS_CAPABILITY)
        assert names == ["openai/gpt-5", "llama-tools"]

    def test_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json=ADVERTISED)

        _locator(handler, api_key="locator-key").get_model_names_by_capability("CHAT")
        assert seen["auth"] == "Bearer locator-key"
        assert seen["url"] == CONFIG_URL

    def test_no_token_without_key(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=ADVERTISED)

        _locator(handler).get_model_names_by_capability("CHAT")
        assert seen["auth"] is None

    def test_empty_document(self):
        locator = _locator(lambda request: httpx.Response(200, json={}))
        assert locator.get_model_names_by_capability(TOOLS_CAPABILITY) == []

    def test_http_error_status(self):
        locator = _locator(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(DiscoveryError) as exc_info:
            locator.get_model_names_by_capability(TOOLS_CAPABILITY)
        assert exc_info.value.http_status == 503

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DiscoveryError) as exc_info:
            _locator(handler).get_model_names_by_capability(TOOLS_CAPABILITY)
        assert exc_info.value.http_status is None

    def test_invalid_json(self):
        locator = _locator(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(DiscoveryError):
            locator.get_model_names_by_capability(TOOLS_CAPABILITY)

    def test_non_object_json(self):
        locator = _locator(lambda request: httpx.Response(200, json=["a"]))
        with pytest.raises(DiscoveryError):
            locator.get_model_names_by_capability(TOOLS_CAPABILITY)

    def test_models_not_a_list(self):
        locator = _locator(lambda request: httpx.Response(200, json={"advertisedModels": "x"}))
        with pytest.raises(DiscoveryError):
            locator.get_model_names_by_capability(TOOLS_CAPABILITY)


class TestBuildLocator:
    def test_none_without_url(self):
        assert build_locator(Settings()) is None

    def test_none_with_blank_url(self):
        settings = Settings(locator_config_url="")
        assert not settings.locator_configured
        assert build_locator(settings) is None

    def test_from_settings(self):
        locator = build_locator(Settings(locator_config_url=CONFIG_URL, locator_api_key="k"))
        assert isinstance(locator, HttpLocator)
        locator.close()
