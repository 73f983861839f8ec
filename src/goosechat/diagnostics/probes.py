"""Diagnostic probes: run goose directly and call the model endpoint directly.

Both bypass the normal session path so a failure can be pinned on either the
executable or the OpenAI-compatible endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import openai
from pydantic import BaseModel

from goosechat.config.environment import Environment
from goosechat.config.schema import Settings
from goosechat.process.invoker import ProcessInvoker
from goosechat.process.outcome import Completed, SpawnFailed, TimedOut

logger = logging.getLogger(__name__)

GOOSE_TEST_PROMPT = "Say hello in one word."
GOOSE_TEST_TIMEOUT_SECONDS = 30.0
GOOSE_TEST_ENV = {"GOOSE_DEBUG": "true", "RUST_LOG": "goose=debug"}

ENDPOINT_TEST_PROMPT = "Say hello"
ENDPOINT_STREAM_TEST_PROMPT = "Say hello in one word."

ClientFactory = Callable[[str, str], openai.OpenAI]


class GooseTestReport(BaseModel):
    goose_path: str | None = None
    provider: str | None = None
    model: str | None = None
    openai_host: str | None = None
    success: bool = False
    exit_code: int | None = None
    output: str = ""
    partial_output: str = ""
    error: str | None = None


class EndpointTestReport(BaseModel):
    model: str | None = None
    base_url: str | None = None
    test_url: str | None = None
    api_key_length: int = 0
    api_key_prefix: str | None = None
    stream: bool = False
    success: bool = False
    response: str | None = None
    chunk_count: int | None = None
    error: str | None = None
    service_name: str | None = None


def run_goose_self_test(
    settings: Settings,
    invoker: ProcessInvoker,
    env: Environment | None = None,
) -> GooseTestReport:
    """Run a one-turn goose session without streaming output."""
    env = env or Environment()
    report = GooseTestReport(
        goose_path=settings.cli_path,
        provider=env.get("GOOSE_PROVIDER"),
        model=env.get("GOOSE_MODEL"),
        openai_host=env.get("OPENAI_HOST"),
    )
    if not settings.cli_path:
        report.error = "GOOSE_CLI_PATH not set"
        return report

    outcome = invoker.invoke(
        settings.cli_path,
        ["session", "--text", GOOSE_TEST_PROMPT, "--max-turns", "1"],
        env_overrides=GOOSE_TEST_ENV,
        timeout=GOOSE_TEST_TIMEOUT_SECONDS,
        observer=lambda line: logger.info("Goose test output: %s", line),
    )

    if isinstance(outcome, SpawnFailed):
        report.error = outcome.reason
    elif isinstance(outcome, TimedOut):
        report.error = f"Goose command timed out after {outcome.timeout_seconds:.0f} seconds"
        report.partial_output = outcome.partial_output
    elif isinstance(outcome, Completed):
        report.exit_code = outcome.exit_code
        report.output = outcome.output
        report.success = outcome.success
    return report


def run_endpoint_test(
    host: str | None,
    api_key: str | None,
    model: str | None,
    stream: bool = False,
    client_factory: ClientFactory | None = None,
) -> EndpointTestReport:
    """Send one small chat completion straight to the endpoint.

    The request is made once; errors are reported, never retried.
    """
    report = EndpointTestReport(stream=stream)
    if not host:
        report.error = "OPENAI_HOST not configured"
        return report
    if not api_key:
        report.error = "OPENAI_API_KEY not configured"
        return report

    model = model or "default"
    base_url = host.rstrip("/") + "/v1"
    report.model = model
    report.base_url = host
    report.test_url = base_url + "/chat/completions"
    report.api_key_length = len(api_key)
    report.api_key_prefix = api_key[:10] + "..." if len(api_key) > 10 else "***"

    factory = client_factory or _default_client
    client = factory(base_url, api_key)
    logger.info("Testing endpoint %s with model %s (stream=%s)", report.test_url, model, stream)

    try:
        if stream:
            chunks = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": ENDPOINT_STREAM_TEST_PROMPT}],
                max_tokens=10,
                stream=True,
            )
            parts: list[str] = []
            count = 0
            for chunk in chunks:
                count += 1
                if chunk.choices and chunk.choices[0].delta.content:
                    parts.append(chunk.choices[0].delta.content)
            report.chunk_count = count
            report.response = "".join(parts)
        else:
            completion = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": ENDPOINT_TEST_PROMPT}],
                max_tokens=50,
                stream=False,
            )
            report.response = completion.choices[0].message.content if completion.choices else ""
        report.success = True
    except openai.OpenAIError as e:
        report.error = f"{type(e).__name__}: {e}"
        logger.error("Endpoint test failed: %s", report.error)

    return report


def _default_client(base_url: str, api_key: str) -> openai.OpenAI:
    return openai.OpenAI(base_url=base_url, api_key=api_key, max_retries=0)
