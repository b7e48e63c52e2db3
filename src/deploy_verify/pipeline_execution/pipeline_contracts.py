"""Pipeline execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from deploy_verify.build_metadata import BuildContext
from deploy_verify.readiness_probing.probe_models import ProbeResult
from deploy_verify.reporting.notification_models import DispatchResult, PipelineStatus
from deploy_verify.verification.scenario_models import VerificationLog


class PipelineStage(str, Enum):
    """Pipeline stages in execution order."""

    CHECKOUT = "checkout"
    BUILD = "build"
    DEPLOY = "deploy"
    READINESS = "readiness"
    VERIFICATION = "verification"


@dataclass(frozen=True)
class PipelineRequest:
    """Input contract for executing one pipeline run."""

    config_path: str | None
    build_number: str | None = None
    skip_checkout: bool = False
    skip_build: bool = False
    skip_deploy: bool = False


@dataclass(frozen=True)
class PipelineOutcome:  # pylint: disable=too-many-instance-attributes
    """Output contract for one finished pipeline run."""

    status: PipelineStatus
    build: BuildContext
    failed_stage: PipelineStage | None
    failure_reason: str | None
    published_images: tuple[str, ...]
    probe_results: tuple[ProbeResult, ...]
    verification: VerificationLog | None
    log_path: Path
    notification: DispatchResult
