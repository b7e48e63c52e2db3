"""Bounded, fixed-interval readiness polling."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import httpx

from .probe_models import ProbeResult, ServiceEndpoint

logger = logging.getLogger(__name__)

ReachabilityCheck = Callable[[ServiceEndpoint], str]


class ReadinessError(Exception):
    """Raised when an endpoint exhausts its attempt budget."""

    def __init__(self, endpoint: ServiceEndpoint, attempts: int, last_error: str) -> None:
        super().__init__(
            f"Service '{endpoint.name}' at {endpoint.url} did not become ready after "
            f"{attempts} attempts: {last_error}"
        )
        self.endpoint = endpoint
        self.attempts = attempts
        self.last_error = last_error


class HttpReachabilityCheck:  # pylint: disable=too-few-public-methods
    """Treat any HTTP response as reachable; transport errors are not."""

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self._timeout_seconds = timeout_seconds

    def __call__(self, endpoint: ServiceEndpoint) -> str:
        response = httpx.get(endpoint.url, timeout=self._timeout_seconds)
        return f"HTTP {response.status_code}"


class EndpointProber:
    """Block until every endpoint answers or one of them runs out of attempts."""

    def __init__(
        self,
        *,
        check: ReachabilityCheck | None = None,
        sleep: Callable[[float], None] = time.sleep,
        initial_delay_seconds: float = 10.0,
    ) -> None:
        self._check = check or HttpReachabilityCheck()
        self._sleep = sleep
        self._initial_delay_seconds = initial_delay_seconds

    def wait_until_ready(self, endpoints: Sequence[ServiceEndpoint]) -> tuple[ProbeResult, ...]:
        """Probe endpoints in declaration order after one settle delay.

        Raises:
          ReadinessError: For the first endpoint that never answered.
        """
        if self._initial_delay_seconds > 0:
            logger.info("Waiting %.0fs for services to settle", self._initial_delay_seconds)
            self._sleep(self._initial_delay_seconds)
        return tuple(self.probe(endpoint) for endpoint in endpoints)

    def probe(self, endpoint: ServiceEndpoint) -> ProbeResult:
        last_error = "no attempt made"
        for attempt in range(1, endpoint.max_attempts + 1):
            try:
                detail = self._check(endpoint)
            except httpx.HTTPError as exc:
                last_error = str(exc) or type(exc).__name__
                logger.info(
                    "%s not ready (attempt %d/%d): %s",
                    endpoint.name,
                    attempt,
                    endpoint.max_attempts,
                    last_error,
                )
            else:
                logger.info("%s ready at %s (%s)", endpoint.name, endpoint.url, detail)
                return ProbeResult(endpoint=endpoint, attempts=attempt, detail=detail)
            if attempt < endpoint.max_attempts:
                self._sleep(endpoint.delay_seconds)
        logger.error("%s did not become ready at %s", endpoint.name, endpoint.url)
        raise ReadinessError(endpoint, endpoint.max_attempts, last_error)
