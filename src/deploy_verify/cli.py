"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from deploy_verify.build_metadata import resolve_build_context
from deploy_verify.configuration import (
    DEFAULT_CONFIG_FILENAME,
    Configuration,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from deploy_verify.deployment import (
    DeploymentError,
    build_and_publish_images,
    checkout_source,
    start_services,
)
from deploy_verify.pipeline_execution import (
    PipelineExecutionError,
    PipelineRequest,
    execute_deployment_pipeline,
)
from deploy_verify.readiness_probing import (
    EndpointProber,
    HttpReachabilityCheck,
    ReadinessError,
    ServiceEndpoint,
)
from deploy_verify.reporting import DispatchStatus, PipelineStatus, report_outcome
from deploy_verify.verification import VerificationSessionError, execute_verification

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


_config_option = click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON pipeline configuration file (defaults apply when omitted)",
)


def _load(config_path: str | None) -> Configuration:
    try:
        return load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="deploy-verify")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity for stage progress written to stderr",
)
def cli(log_level: str) -> None:
    """Deployment readiness and browser verification pipeline."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML pipeline configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML pipeline configuration with defaults and guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="checkout")
@_config_option
def checkout(config_path: str | None) -> None:
    """Clone the repository or refresh the existing checkout in place."""
    configuration = _load(config_path)
    try:
        workdir = checkout_source(configuration.checkout)
    except DeploymentError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(workdir))


@cli.command(name="deploy")
@_config_option
@click.option("--build-number", required=False, help="Override BUILD_NUMBER for image tags")
@click.option(
    "--skip-build",
    is_flag=True,
    default=False,
    help="Start services from already published images without building.",
)
def deploy(config_path: str | None, build_number: str | None, skip_build: bool) -> None:
    """Build and publish images, then restart the compose services."""
    configuration = _load(config_path)
    build = resolve_build_context(configuration.project.name, build_number=build_number)
    try:
        if not skip_build:
            for reference in build_and_publish_images(
                configuration.images, build, workdir=configuration.checkout.workdir
            ):
                click.echo(reference)
        start_services(configuration.deployment)
    except DeploymentError as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="probe")
@_config_option
def probe(config_path: str | None) -> None:
    """Wait until every readiness endpoint answers."""
    readiness = _load(config_path).readiness
    prober = EndpointProber(
        check=HttpReachabilityCheck(readiness.request_timeout_seconds),
        initial_delay_seconds=readiness.initial_delay_seconds,
    )
    try:
        results = prober.wait_until_ready(
            [ServiceEndpoint.from_settings(endpoint) for endpoint in readiness.endpoints]
        )
    except ReadinessError as exc:
        raise CliError(str(exc)) from exc
    for result in results:
        click.echo(f"{result.endpoint.name}: ready after {result.attempts} attempt(s)")


@cli.command(name="verify")
@_config_option
def verify(config_path: str | None) -> None:
    """Run the browser verification suite and write the verification log."""
    configuration = _load(config_path)
    try:
        log, log_path = execute_verification(configuration.verification)
    except VerificationSessionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"{log.passed} passing, {log.failed} failing, {log.skipped} pending")
    click.echo(str(log_path))
    if configuration.verification.fail_on_scenario_failure and log.failed:
        raise CliError(f"{log.failed} verification scenario(s) failed")


@cli.command(name="report")
@_config_option
@click.option(
    "--status",
    required=True,
    type=click.Choice([status.value for status in PipelineStatus]),
    help="Terminal status of the pipeline being reported",
)
@click.option(
    "--log",
    "log_path",
    required=False,
    type=click.Path(path_type=Path),
    help="Verification log to summarise (defaults to verification.log_path)",
)
@click.option("--reason", required=False, help="Failure reason included in the notification")
def report(
    config_path: str | None, status: str, log_path: Path | None, reason: str | None
) -> None:
    """Send the success or failure notification for a finished pipeline."""
    configuration = _load(config_path)
    if configuration.notification is None:
        raise CliError("Configuration section 'notification' is required.")
    result = report_outcome(
        PipelineStatus(status),
        settings=configuration.notification,
        build=resolve_build_context(configuration.project.name),
        log_path=log_path or configuration.verification.log_path,
        failure_reason=reason,
    )
    # Dispatch is best-effort; a failed send does not change the exit code.
    if result.status == DispatchStatus.FAILED:
        click.echo(f"notification not sent: {result.error_message}", err=True)
    else:
        click.echo(f"{status} notification sent")


@cli.command(name="run")
@_config_option
@click.option("--build-number", required=False, help="Override BUILD_NUMBER for image tags")
@click.option("--skip-checkout", is_flag=True, default=False, help="Use the current tree as is.")
@click.option("--skip-build", is_flag=True, default=False, help="Do not build or push images.")
@click.option("--skip-deploy", is_flag=True, default=False, help="Do not restart services.")
def run_pipeline(
    config_path: str | None,
    build_number: str | None,
    skip_checkout: bool,
    skip_build: bool,
    skip_deploy: bool,
) -> None:
    """Run the full pipeline: deploy, gate on readiness, verify, report, clean up."""
    try:
        outcome = execute_deployment_pipeline(
            PipelineRequest(
                config_path=config_path,
                build_number=build_number,
                skip_checkout=skip_checkout,
                skip_build=skip_build,
                skip_deploy=skip_deploy,
            )
        )
    except PipelineExecutionError as exc:
        raise CliError(str(exc)) from exc
    if outcome.verification is not None:
        log = outcome.verification
        click.echo(f"{log.passed} passing, {log.failed} failing, {log.skipped} pending")
    click.echo(str(outcome.log_path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
