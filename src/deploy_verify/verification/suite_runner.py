"""Sequential verification suite execution."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from selenium.common.exceptions import WebDriverException

from deploy_verify.configuration.runtime_settings import VerificationSettings

from .browser_session import BrowserSession, DriverFactory, create_chrome_driver
from .scenario_catalog import SCENARIOS, Scenario
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
from .verification_log_writer import write_verification_log

logger = logging.getLogger(__name__)


def run_verification_suite(
    session: BrowserSession,
    identity: TestIdentity,
    scenarios: Sequence[Scenario] = SCENARIOS,
) -> VerificationLog:
    """Run every scenario once, in order, on the shared session.

    A failing scenario is recorded and the run moves on to the next one; a
    scenario whose precondition does not hold, or that raises ScenarioSkipped
    after its unconditional checks, is recorded as skipped.
    """
    results = []
    for index, scenario in enumerate(scenarios, start=1):
        logger.info("Scenario %d/%d: %s", index, len(scenarios), scenario.title)
        result = _run_scenario(scenario, session, ScenarioContext(identity=identity))
        if result.outcome == ScenarioOutcome.FAILED:
            logger.warning("%s failed: %s", scenario.name, result.message)
        else:
            logger.info("%s %s", scenario.name, result.outcome.value)
        results.append(result)
    return VerificationLog(base_url=session.base_url, results=tuple(results))


def _run_scenario(
    scenario: Scenario, session: BrowserSession, context: ScenarioContext
) -> ScenarioResult:
    try:
        if scenario.precondition is not None:
            skip_reason = scenario.precondition(session)
            if skip_reason is not None:
                return ScenarioResult(
                    name=scenario.name,
                    outcome=ScenarioOutcome.SKIPPED,
                    message=skip_reason,
                )
        scenario.run(session, context)
    except ScenarioSkipped as exc:
        return ScenarioResult(
            name=scenario.name,
            outcome=ScenarioOutcome.SKIPPED,
            message=str(exc),
            notes=tuple(context.notes),
        )
    except VerificationFailure as exc:
        return _failed(scenario, context, str(exc))
    except WebDriverException as exc:
        return _failed(scenario, context, _describe_driver_error(exc))
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected error in scenario %s", scenario.name)
        return _failed(scenario, context, f"{type(exc).__name__}: {exc}")
    return ScenarioResult(
        name=scenario.name,
        outcome=ScenarioOutcome.PASSED,
        notes=tuple(context.notes),
    )


def _failed(scenario: Scenario, context: ScenarioContext, message: str) -> ScenarioResult:
    return ScenarioResult(
        name=scenario.name,
        outcome=ScenarioOutcome.FAILED,
        message=message,
        notes=tuple(context.notes),
    )


def _describe_driver_error(exc: WebDriverException) -> str:
    message = (exc.msg or type(exc).__name__).strip()
    return message.splitlines()[0] if message else type(exc).__name__


def execute_verification(
    settings: VerificationSettings,
    *,
    identity: TestIdentity | None = None,
    driver_factory: DriverFactory = create_chrome_driver,
    scenarios: Sequence[Scenario] = SCENARIOS,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[VerificationLog, Path]:
    """Start a browser, run the suite, persist the log and release the browser.

    Raises:
      VerificationSessionError: If the browser session cannot be started.
    """
    try:
        driver = driver_factory(settings)
    except WebDriverException as exc:
        raise VerificationSessionError(_describe_driver_error(exc)) from exc
    session = BrowserSession(
        driver,
        base_url=settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        sleep=sleep,
    )
    try:
        log = run_verification_suite(session, identity or generate_test_identity(), scenarios)
    finally:
        session.close()
    log_path = write_verification_log(log, settings.log_path)
    logger.info(
        "Verification finished: %d passing, %d failing, %d pending (log: %s)",
        log.passed,
        log.failed,
        log.skipped,
        log_path,
    )
    return log, log_path
