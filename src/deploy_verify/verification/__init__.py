"""Browser verification exports."""

from .browser_session import BrowserSession, build_chrome_options, create_chrome_driver
from .scenario_catalog import SCENARIO_NAMES, SCENARIOS, Scenario
from .scenario_models import (
    ScenarioContext,
    ScenarioOutcome,
    ScenarioResult,
    ScenarioSkipped,
    TestIdentity,
    VerificationFailure,
    VerificationLog,
    VerificationSessionError,
    generate_test_identity,
)
from .suite_runner import execute_verification, run_verification_suite
from .verification_log_writer import render_verification_log, write_verification_log

__all__ = [
    "BrowserSession",
    "build_chrome_options",
    "create_chrome_driver",
    "SCENARIO_NAMES",
    "SCENARIOS",
    "Scenario",
    "ScenarioContext",
    "ScenarioOutcome",
    "ScenarioResult",
    "ScenarioSkipped",
    "TestIdentity",
    "VerificationFailure",
    "VerificationLog",
    "VerificationSessionError",
    "generate_test_identity",
    "execute_verification",
    "run_verification_suite",
    "render_verification_log",
    "write_verification_log",
]
