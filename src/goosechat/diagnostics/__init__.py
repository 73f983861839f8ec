"""Diagnostics: health reporting, self-tests and masked environment views."""

from goosechat.diagnostics.env import filtered_environment, is_relevant, is_sensitive, mask_if_sensitive
from goosechat.diagnostics.health import HealthReport, check_health, check_health_async
from goosechat.diagnostics.probes import (
    EndpointTestReport,
    GooseTestReport,
    run_endpoint_test,
    run_goose_self_test,
)

__all__ = [
    "EndpointTestReport",
    "GooseTestReport",
    "HealthReport",
    "check_health",
    "check_health_async",
    "filtered_environment",
    "is_relevant",
    "is_sensitive",
    "mask_if_sensitive",
    "run_endpoint_test",
    "run_goose_self_test",
]
