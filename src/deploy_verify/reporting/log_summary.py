"""Verification log parsing for the reporting stage."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_PLACEHOLDER = "Verification log not available."

_PASSING_PATTERN = re.compile(r"(\d+) passing")
_FAILING_PATTERN = re.compile(r"(\d+) failing")


@dataclass(frozen=True)
class LogSummary:
    """Counts extracted from a verification log."""

    passing: int
    failing: int
    text: str
    readable: bool


def summarize_log_text(text: str) -> LogSummary:
    return LogSummary(
        passing=_first_count(_PASSING_PATTERN, text),
        failing=_first_count(_FAILING_PATTERN, text),
        text=text,
        readable=True,
    )


def read_log_summary(path: Path | str) -> LogSummary:
    """Read counts from the persisted log; unreadable logs yield zero counts."""
    log_path = Path(path)
    try:
        text = log_path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Could not read verification log %s: %s", log_path, exc)
        return LogSummary(passing=0, failing=0, text=LOG_PLACEHOLDER, readable=False)
    return summarize_log_text(text)


def _first_count(pattern: re.Pattern[str], text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0
