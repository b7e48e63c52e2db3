"""Verification log summary tests."""

from __future__ import annotations

from pathlib import Path

from deploy_verify.reporting import LOG_PLACEHOLDER, read_log_summary, summarize_log_text


def test_extracts_passing_and_failing_counts() -> None:
    summary = summarize_log_text("Suite\n\n  8 passing (41s)\n  2 failing\n")

    assert (summary.passing, summary.failing) == (8, 2)
    assert summary.readable is True


def test_missing_counts_default_to_zero() -> None:
    summary = summarize_log_text("  7 passing\n")

    assert (summary.passing, summary.failing) == (7, 0)


def test_unreadable_log_yields_placeholder_and_zero_counts(tmp_path: Path) -> None:
    summary = read_log_summary(tmp_path / "missing.log")

    assert summary.text == LOG_PLACEHOLDER
    assert (summary.passing, summary.failing) == (0, 0)
    assert summary.readable is False


def test_reads_counts_from_log_file(tmp_path: Path) -> None:
    log_path = tmp_path / "verification.log"
    log_path.write_text("  10 passing\n  0 failing\n  0 pending\n", encoding="utf-8")

    summary = read_log_summary(log_path)

    assert (summary.passing, summary.failing) == (10, 0)
    assert "10 passing" in summary.text
