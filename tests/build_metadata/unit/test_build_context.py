"""Build context resolution tests."""

from __future__ import annotations

from deploy_verify.build_metadata import resolve_build_context


def test_reads_ci_identifiers_from_environment() -> None:
    build = resolve_build_context(
        "food-delivery",
        environ={
            "BUILD_NUMBER": "42",
            "BUILD_URL": "https://ci.example.com/job/food-delivery/42",
            "GIT_BRANCH": "origin/main",
            "GIT_COMMIT": "abc123",
        },
    )

    assert build.project_name == "food-delivery"
    assert build.build_number == "42"
    assert build.build_url == "https://ci.example.com/job/food-delivery/42"
    assert build.branch == "origin/main"
    assert build.revision == "abc123"
    assert build.image_tags == ("latest", "42")
    assert build.build_label == "#42"


def test_explicit_build_number_wins_over_environment() -> None:
    build = resolve_build_context("app", environ={"BUILD_NUMBER": "7"}, build_number="8")

    assert build.build_number == "8"
    assert build.image_tags == ("latest", "8")


def test_local_run_only_tags_latest() -> None:
    build = resolve_build_context("app", environ={"BUILD_NUMBER": "  "})

    assert build.build_number is None
    assert build.build_url is None
    assert build.image_tags == ("latest",)
    assert build.build_label == "(local)"


def test_project_name_falls_back_to_job_name_then_default() -> None:
    assert resolve_build_context(None, environ={"JOB_NAME": "nightly"}).project_name == "nightly"
    assert resolve_build_context(None, environ={}).project_name == "deployment"
