"""Deployment domain exports."""

from .command_runner import CommandRunner, DeploymentError, run_best_effort, run_checked_command
from .image_publishing import build_and_publish_images, image_references
from .service_startup import compose_command, run_cleanup, start_services
from .source_checkout import checkout_source

__all__ = [
    "CommandRunner",
    "DeploymentError",
    "run_best_effort",
    "run_checked_command",
    "build_and_publish_images",
    "image_references",
    "compose_command",
    "run_cleanup",
    "start_services",
    "checkout_source",
]
