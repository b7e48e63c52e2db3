"""Readiness probing exports."""

from .endpoint_prober import EndpointProber, HttpReachabilityCheck, ReadinessError
from .probe_models import ProbeResult, ServiceEndpoint

__all__ = [
    "EndpointProber",
    "HttpReachabilityCheck",
    "ReadinessError",
    "ProbeResult",
    "ServiceEndpoint",
]
