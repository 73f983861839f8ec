"""Tests for the health report."""

import sys
from unittest.mock import MagicMock

import pytest

from goosechat.config.environment import Environment
from goosechat.config.schema import Settings
from goosechat.diagnostics.health import NOT_CONFIGURED_MESSAGE, check_health, check_health_async
from goosechat.discovery.cache import DiscoveryCache
from goosechat.process.invoker import ProcessInvoker
from goosechat.process.outcome import Completed
from goosechat.resolver import ConfigSource, PrecedenceResolver


def _resolver(env_values):
    env = Environment(env_values)
    return PrecedenceResolver(DiscoveryCache(env=env), env)


@pytest.fixture
def goose_script(tmp_path):
    """Executable that records each call and prints a version."""
    calls = tmp_path / "calls"
    script = tmp_path / "goose"
    script.write_text(f"#!/bin/sh\necho \"$@\" >> {calls}\necho 'goose 1.9.0'\n")
    script.chmod(0o755)
    return script, calls


class TestCheckHealth:
    def test_not_configured(self):
        invoker = MagicMock(spec=ProcessInvoker)
        report = check_health(Settings(), invoker, _resolver({"ANTHROPIC_API_KEY": "k"}))
        assert not report.available
        assert report.version == "not configured"
        assert report.message == NOT_CONFIGURED_MESSAGE
        assert report.provider == "anthropic"
        invoker.check_version.assert_not_called()

    def test_available(self):
        invoker = MagicMock(spec=ProcessInvoker)
        invoker.check_version.return_value = Completed(exit_code=0, output="\ngoose 1.9.0\n")
        report = check_health(
            Settings(cli_path="/usr/bin/goose"),
            invoker,
            _resolver({"GOOSE_PROVIDER": "openai", "GOOSE_MODEL": "gpt-4o"}),
        )
        assert report.available
        assert report.version == "goose 1.9.0"
        assert report.message == "Goose CLI is ready"
        assert (report.provider, report.model) == ("openai", "gpt-4o")
        assert report.source == ConfigSource.ENVIRONMENT
        invoker.check_version.assert_called_once_with("/usr/bin/goose")

    def test_available_without_version_text(self):
        invoker = MagicMock(spec=ProcessInvoker)
        invoker.check_version.return_value = Completed(exit_code=0, output="")
        report = check_health(Settings(cli_path="/usr/bin/goose"), invoker, _resolver({}))
        assert report.available
        assert report.version == "unknown"

    def test_unavailable(self):
        invoker = MagicMock(spec=ProcessInvoker)
        invoker.check_version.return_value = None
        report = check_health(Settings(cli_path="/missing/goose"), invoker, _resolver({}))
        assert not report.available
        assert report.version == "unavailable"
        assert report.message == "Goose CLI binary not found or not configured"
        assert (report.provider, report.model) == ("unknown", "default")

    def test_real_executable(self, tmp_path):
        report = check_health(
            Settings(cli_path=str(tmp_path / "goose")), ProcessInvoker(), _resolver({})
        )
        assert not report.available

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
    def test_version_runs_once(self, goose_script):
        script, calls = goose_script
        report = check_health(Settings(cli_path=str(script)), ProcessInvoker(), _resolver({}))
        assert report.available
        assert report.version == "goose 1.9.0"
        assert calls.read_text().splitlines() == ["--version"]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell script")
class TestHealthInsideEventLoop:
    async def test_sync_check(self, goose_script):
        script, _ = goose_script
        report = check_health(Settings(cli_path=str(script)), ProcessInvoker(), _resolver({}))
        assert report.available
        assert report.version == "goose 1.9.0"

    async def test_async_check(self, goose_script):
        script, calls = goose_script
        report = await check_health_async(
            Settings(cli_path=str(script)), ProcessInvoker(), _resolver({})
        )
        assert report.available
        assert report.version == "goose 1.9.0"
        assert calls.read_text().splitlines() == ["--version"]

    async def test_async_not_configured(self):
        report = await check_health_async(Settings(), ProcessInvoker(), _resolver({}))
        assert report.version == "not configured"
