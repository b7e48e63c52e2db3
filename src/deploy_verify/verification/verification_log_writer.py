"""Plain-text verification log rendering."""

from __future__ import annotations

from pathlib import Path

from .scenario_models import ScenarioOutcome, VerificationLog

SUITE_TITLE = "Deployment Verification Suite"

_MARKERS = {
    ScenarioOutcome.PASSED: "✓",
    ScenarioOutcome.FAILED: "✗",
    ScenarioOutcome.SKIPPED: "-",
}


def render_verification_log(log: VerificationLog) -> str:
    """Render results in declared order followed by the summary counts."""
    lines = [SUITE_TITLE, f"Base URL: {log.base_url}", ""]
    for index, result in enumerate(log.results, start=1):
        lines.append(f"  {index}. {result.name}")
        lines.extend(f"    {note}" for note in result.notes)
        status_line = f"    {_MARKERS[result.outcome]} {result.outcome.value}"
        if result.message:
            status_line += f": {result.message}"
        lines.append(status_line)
        lines.append("")

    lines.append(f"  {log.passed} passing")
    lines.append(f"  {log.failed} failing")
    lines.append(f"  {log.skipped} pending")

    failures = [result for result in log.results if result.outcome == ScenarioOutcome.FAILED]
    if failures:
        lines.append("")
        for index, result in enumerate(failures, start=1):
            lines.append(f"  {index}) {result.name}: {result.message}")
    return "\n".join(lines) + "\n"


def write_verification_log(log: VerificationLog, path: Path | str) -> Path:
    """Persist the rendered log for the reporting stage."""
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(render_verification_log(log), encoding="utf-8")
    return destination.resolve()
