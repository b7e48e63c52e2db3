"""Container image build and publish."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from deploy_verify.build_metadata import BuildContext
from deploy_verify.configuration.runtime_settings import ImageSettings, ImageSpec

from .command_runner import CommandRunner, run_checked_command

logger = logging.getLogger(__name__)


def image_references(image: ImageSpec, build_context: BuildContext) -> tuple[str, ...]:
    """Return every ``repository:tag`` reference built for one image."""
    return tuple(f"{image.repository}:{tag}" for tag in build_context.image_tags)


def build_and_publish_images(
    settings: ImageSettings,
    build_context: BuildContext,
    *,
    workdir: Path,
    run_command: CommandRunner | None = None,
) -> tuple[str, ...]:
    """Build and push one image per configured service.

    Services are handled one after another. A failure raises immediately;
    images already pushed stay published.
    """
    command_runner = run_command or run_checked_command
    registry = settings.registry
    if registry.username and registry.password:
        login = ["docker", "login", "--username", registry.username, "--password-stdin"]
        if registry.server:
            login.append(registry.server)
        # Password travels through the environment, never the argument list.
        command_runner(
            ("sh", "-c", 'printf "%s" "$REGISTRY_PASSWORD" | ' + shlex.join(login)),
            workdir,
            {"REGISTRY_PASSWORD": registry.password},
        )

    published: list[str] = []
    for image in settings.images:
        references = image_references(image, build_context)
        build_command: list[str] = ["docker", "build"]
        for reference in references:
            build_command.extend(["-t", reference])
        build_command.append(str(image.context))
        logger.info("Building image for %s", image.service)
        command_runner(tuple(build_command), workdir, None)
        for reference in references:
            command_runner(("docker", "push", reference), workdir, None)
            published.append(reference)
        logger.info("Published %s", ", ".join(references))
    return tuple(published)
