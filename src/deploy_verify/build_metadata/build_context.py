"""Build identifiers shared by every pipeline stage."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

LATEST_TAG = "latest"


@dataclass(frozen=True)
class BuildContext:
    """Identifiers for the current pipeline run."""

    project_name: str
    build_number: str | None
    build_url: str | None
    branch: str | None
    revision: str | None
    image_tags: tuple[str, ...]

    @property
    def build_label(self) -> str:
        return f"#{self.build_number}" if self.build_number else "(local)"


def resolve_build_context(
    project_name: str | None,
    *,
    environ: Mapping[str, str] | None = None,
    build_number: str | None = None,
    branch: str | None = None,
    revision: str | None = None,
) -> BuildContext:
    """Read CI build identifiers from the environment; explicit arguments win.

    The Jenkins-style variables ``BUILD_NUMBER``, ``BUILD_URL``, ``GIT_BRANCH``
    and ``GIT_COMMIT`` are recognised; ``JOB_NAME`` is used when no project
    name is configured.
    """
    env = os.environ if environ is None else environ
    resolved_number = build_number or _env_value(env, "BUILD_NUMBER")
    tags = [LATEST_TAG]
    if resolved_number:
        tags.append(resolved_number)
    return BuildContext(
        project_name=project_name or _env_value(env, "JOB_NAME") or "deployment",
        build_number=resolved_number,
        build_url=_env_value(env, "BUILD_URL"),
        branch=branch or _env_value(env, "GIT_BRANCH"),
        revision=revision or _env_value(env, "GIT_COMMIT"),
        image_tags=tuple(tags),
    )


def _env_value(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, "").strip()
    return value or None
