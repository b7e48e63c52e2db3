"""Deployment pipeline use-case service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from deploy_verify.build_metadata import BuildContext, resolve_build_context
from deploy_verify.configuration import Configuration, ConfigurationError, load_configuration
from deploy_verify.deployment import (
    CommandRunner,
    DeploymentError,
    build_and_publish_images,
    checkout_source,
    run_checked_command,
    run_cleanup,
    start_services,
)
from deploy_verify.readiness_probing import (
    EndpointProber,
    HttpReachabilityCheck,
    ProbeResult,
    ReadinessError,
    ServiceEndpoint,
)
from deploy_verify.readiness_probing.endpoint_prober import ReachabilityCheck
from deploy_verify.reporting import PipelineStatus, report_outcome
from deploy_verify.reporting.notification_dispatch import SMTPClient
from deploy_verify.verification import (
    VerificationLog,
    VerificationSessionError,
    create_chrome_driver,
    execute_verification,
)
from deploy_verify.verification.browser_session import DriverFactory

from .pipeline_contracts import PipelineOutcome, PipelineRequest, PipelineStage

logger = logging.getLogger(__name__)


class PipelineExecutionError(Exception):
    """Raised when a fatal stage failed; carries the finished outcome when there is one."""

    def __init__(self, message: str, outcome: PipelineOutcome | None = None) -> None:
        super().__init__(message)
        self.outcome = outcome


@dataclass
class _StageProgress:
    """Mutable record of what the stages produced so far."""

    stage: PipelineStage = PipelineStage.CHECKOUT
    published_images: tuple[str, ...] = ()
    probe_results: tuple[ProbeResult, ...] = ()
    verification: VerificationLog | None = None
    failure_reason: str | None = None
    failed_stage: PipelineStage | None = None


# pylint: disable=too-many-arguments
def execute_deployment_pipeline(
    request: PipelineRequest,
    *,
    run_command: CommandRunner | None = None,
    reachability_check: ReachabilityCheck | None = None,
    driver_factory: DriverFactory | None = None,
    smtp_client: SMTPClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
    environ: Mapping[str, str] | None = None,
) -> PipelineOutcome:
    """Run checkout, build, deploy, readiness gate, verification, report and cleanup.

    Exactly one notification is sent, selected by whether every fatal stage
    succeeded. Cleanup runs after the notification in every case.

    Raises:
      PipelineExecutionError: If configuration is invalid or a fatal stage failed.
    """
    configuration = _load_pipeline_configuration(request.config_path, environ)
    notification = configuration.notification
    if notification is None:
        raise PipelineExecutionError("Configuration section 'notification' is required.")

    build = resolve_build_context(
        configuration.project.name, environ=environ, build_number=request.build_number
    )
    command_runner = run_command or run_checked_command
    log_path = configuration.verification.log_path
    log_path.unlink(missing_ok=True)

    progress = _StageProgress()
    try:
        _run_stages(
            request,
            configuration,
            build,
            progress,
            command_runner=command_runner,
            reachability_check=reachability_check,
            driver_factory=driver_factory or create_chrome_driver,
            sleep=sleep,
        )
    except (DeploymentError, ReadinessError, VerificationSessionError) as exc:
        progress.failed_stage = progress.stage
        progress.failure_reason = str(exc)
        logger.error("Pipeline failed during %s: %s", progress.stage.value, exc)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        # The failure notification and cleanup still run for unexpected errors.
        progress.failed_stage = progress.stage
        progress.failure_reason = f"{type(exc).__name__}: {exc}"
        logger.exception("Unexpected error during %s", progress.stage.value)

    status = PipelineStatus.FAILURE if progress.failure_reason else PipelineStatus.SUCCESS
    dispatch = report_outcome(
        status,
        settings=notification,
        build=build,
        log_path=log_path,
        failure_reason=progress.failure_reason,
        smtp_client=smtp_client,
    )
    run_cleanup(
        configuration.cleanup, cwd=configuration.checkout.workdir, run_command=command_runner
    )

    outcome = PipelineOutcome(
        status=status,
        build=build,
        failed_stage=progress.failed_stage,
        failure_reason=progress.failure_reason,
        published_images=progress.published_images,
        probe_results=progress.probe_results,
        verification=progress.verification,
        log_path=log_path,
        notification=dispatch,
    )
    if progress.failure_reason:
        raise PipelineExecutionError(progress.failure_reason, outcome)
    logger.info("Pipeline finished successfully for build %s", build.build_label)
    return outcome


def _load_pipeline_configuration(
    config_path: str | None, environ: Mapping[str, str] | None
) -> Configuration:
    try:
        return load_configuration(config_path, environ=environ)
    except ConfigurationError as exc:
        raise PipelineExecutionError(str(exc)) from exc


# pylint: disable=too-many-arguments
def _run_stages(
    request: PipelineRequest,
    configuration: Configuration,
    build: BuildContext,
    progress: _StageProgress,
    *,
    command_runner: CommandRunner,
    reachability_check: ReachabilityCheck | None,
    driver_factory: DriverFactory,
    sleep: Callable[[float], None],
) -> None:
    workdir = configuration.checkout.workdir

    progress.stage = PipelineStage.CHECKOUT
    if request.skip_checkout:
        logger.info("Skipping %s stage", PipelineStage.CHECKOUT.value)
    else:
        checkout_source(configuration.checkout, run_command=command_runner)

    progress.stage = PipelineStage.BUILD
    if request.skip_build:
        logger.info("Skipping %s stage", PipelineStage.BUILD.value)
    else:
        progress.published_images = build_and_publish_images(
            configuration.images, build, workdir=workdir, run_command=command_runner
        )

    progress.stage = PipelineStage.DEPLOY
    if request.skip_deploy:
        logger.info("Skipping %s stage", PipelineStage.DEPLOY.value)
    else:
        start_services(configuration.deployment, run_command=command_runner)

    progress.stage = PipelineStage.READINESS
    readiness = configuration.readiness
    prober = EndpointProber(
        check=reachability_check or HttpReachabilityCheck(readiness.request_timeout_seconds),
        sleep=sleep,
        initial_delay_seconds=readiness.initial_delay_seconds,
    )
    progress.probe_results = prober.wait_until_ready(
        [ServiceEndpoint.from_settings(endpoint) for endpoint in readiness.endpoints]
    )

    progress.stage = PipelineStage.VERIFICATION
    verification, _ = execute_verification(
        configuration.verification, driver_factory=driver_factory, sleep=sleep
    )
    progress.verification = verification
    if configuration.verification.fail_on_scenario_failure and verification.failed:
        progress.failed_stage = PipelineStage.VERIFICATION
        progress.failure_reason = f"{verification.failed} verification scenario(s) failed"
