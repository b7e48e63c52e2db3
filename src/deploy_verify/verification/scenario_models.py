"""Verification domain entities."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

T = TypeVar("T")

DEFAULT_TEST_PASSWORD = "Test@123456"


class VerificationFailure(Exception):
    """Raised inside a scenario when an expectation does not hold."""


class VerificationSessionError(Exception):
    """Raised when the browser session cannot be started."""


class ScenarioSkipped(Exception):
    """Raised inside a scenario when the rest of the group cannot run."""


class ScenarioOutcome(str, Enum):
    """Recorded outcome of one scenario group."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class TestIdentity:
    """Throwaway account used by the registration and login scenarios."""

    __test__ = False

    name: str
    email: str
    password: str


def generate_test_identity(now: Callable[[], float] = time.time) -> TestIdentity:
    """Build an identity whose email is unique per run."""
    return TestIdentity(
        name="Test User",
        email=f"testuser{int(now() * 1000)}@test.com",
        password=DEFAULT_TEST_PASSWORD,
    )


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of one scenario group with the console lines it produced."""

    name: str
    outcome: ScenarioOutcome
    message: str | None = None
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class VerificationLog:
    """Ordered scenario results of one verification run."""

    base_url: str
    results: tuple[ScenarioResult, ...]

    @property
    def passed(self) -> int:
        return self._count(ScenarioOutcome.PASSED)

    @property
    def failed(self) -> int:
        return self._count(ScenarioOutcome.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ScenarioOutcome.SKIPPED)

    def _count(self, outcome: ScenarioOutcome) -> int:
        return sum(1 for result in self.results if result.outcome == outcome)


@dataclass
class ScenarioContext:
    """Per-scenario state handed to scenario functions."""

    identity: TestIdentity
    notes: list[str] = field(default_factory=list)

    def note(self, message: str) -> None:
        self.notes.append(message)


def expect(condition: object, message: str) -> None:
    """Fail the running scenario unless ``condition`` is truthy."""
    if not condition:
        raise VerificationFailure(message)


def require(value: T | None, message: str) -> T:
    """Return ``value`` or fail the running scenario when it is missing."""
    if value is None:
        raise VerificationFailure(message)
    return value
