"""
Metrics Collection
Prometheus metrics for pipeline and oracle activity.
"""

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects Prometheus metrics on a private registry.

    A private registry lets several collectors (one per container, one per
    test) coexist without duplicate-registration errors.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        self.pipeline_requests_total = Counter(
            "uib_pipeline_requests_total",
            "Pipeline runs by action and outcome",
            ["action", "status"],
            registry=self.registry,
        )
        self.stage_duration = Histogram(
            "uib_stage_duration_seconds",
            "Pipeline stage duration in seconds",
            ["stage"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )
        self.oracle_calls_total = Counter(
            "uib_oracle_calls_total",
            "Oracle calls by outcome",
            ["outcome"],
            registry=self.registry,
        )
        self.plan_sources_total = Counter(
            "uib_plan_sources_total",
            "Where accepted plans came from",
            ["source"],
            registry=self.registry,
        )
        self.oracle_plan_rejections_total = Counter(
            "uib_oracle_plan_rejections_total",
            "Oracle plans rejected by parsing or validation",
            ["reason"],
            registry=self.registry,
        )
        self.versions_stored = Gauge(
            "uib_versions_stored",
            "Snapshots held by the version store",
            registry=self.registry,
        )

    def record_request(self, action: str, status: str) -> None:
        self.pipeline_requests_total.labels(action=action, status=status).inc()

    def record_oracle_call(self, outcome: str) -> None:
        self.oracle_calls_total.labels(outcome=outcome).inc()

    def record_plan_source(self, source: str) -> None:
        self.plan_sources_total.labels(source=source).inc()

    def record_plan_rejection(self, reason: str) -> None:
        self.oracle_plan_rejections_total.labels(reason=reason).inc()

    def set_versions_stored(self, count: int) -> None:
        self.versions_stored.set(count)

    @contextmanager
    def time_stage(self, stage: str) -> Iterator[None]:
        """Observe how long a pipeline stage takes, including failures."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.stage_duration.labels(stage=stage).observe(time.perf_counter() - start)

    def export(self) -> bytes:
        """Prometheus text exposition of this collector's registry."""
        return generate_latest(self.registry)

    def sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Current value of a sample (0.0 if never recorded)."""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0
