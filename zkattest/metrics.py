"""
Prometheus metrics for zkattest.

Counters and gauges for:
- Root submissions by channel ("direct", "batch", "ismp") and outcome
  ("accepted" or the rejecting error code)
- Inclusion verifications by result ("included", "not_included", "error")
- Latest accepted id per channel

Typical usage:

    from zkattest.metrics import get_metrics

    METRICS = get_metrics()
    METRICS.submission("direct", "accepted")

To expose `/metrics` from a host process:

    from prometheus_client import start_http_server
    start_http_server(9100)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge


@dataclass(frozen=True)
class _Labels:
    """Canonical label keys used across metrics."""

    channel: str = "channel"
    outcome: str = "outcome"
    result: str = "result"


class AttestationMetrics:
    """Concrete metrics backed by prometheus_client."""

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        *,
        enabled: bool = True,
    ) -> None:
        self.enabled = enabled
        self.registry = registry if registry is not None else REGISTRY
        labels = _Labels()

        self.submissions_total = Counter(
            "zkattest_submissions_total",
            "Root submissions by channel and outcome",
            [labels.channel, labels.outcome],
            registry=self.registry,
        )
        self.verifications_total = Counter(
            "zkattest_verifications_total",
            "Inclusion verifications by result",
            [labels.result],
            registry=self.registry,
        )
        self.latest_id = Gauge(
            "zkattest_latest_id",
            "Highest accepted id per channel",
            [labels.channel],
            registry=self.registry,
        )

    def submission(self, channel: str, outcome: str, *, count: int = 1) -> None:
        if self.enabled and count > 0:
            self.submissions_total.labels(channel=channel, outcome=outcome).inc(count)

    def verification(self, result: str) -> None:
        if self.enabled:
            self.verifications_total.labels(result=result).inc()

    def set_latest(self, channel: str, latest_id: int) -> None:
        if self.enabled:
            self.latest_id.labels(channel=channel).set(latest_id)


_METRICS: Optional[AttestationMetrics] = None


def get_metrics() -> AttestationMetrics:
    """Process-wide metrics on the default registry (created once)."""
    global _METRICS
    if _METRICS is None:
        from zkattest.config import get_settings

        _METRICS = AttestationMetrics(enabled=get_settings().metrics_enabled)
    return _METRICS


__all__ = ["AttestationMetrics", "get_metrics"]
