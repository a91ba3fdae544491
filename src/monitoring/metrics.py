"""
Metrics Collection
Prometheus metrics for the app builder
"""

from prometheus_client import Counter, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the builder.
    """

    def __init__(self) -> None:
        # Preview actions
        self.action_executions_total = Counter(
            "builder_action_executions_total",
            "Total number of preview action executions",
            ["action", "status"],
        )
        self.action_duration = Histogram(
            "builder_action_duration_seconds",
            "Preview action duration in seconds",
            ["action"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
        )

        # Description / code generation
        self.generation_requests_total = Counter(
            "builder_generation_requests_total",
            "Total number of AI generation requests",
            ["kind", "status"],
        )
        self.generation_duration = Histogram(
            "builder_generation_duration_seconds",
            "AI generation duration in seconds",
            ["kind"],
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
        )

        # Deployments
        self.deployments_total = Counter(
            "builder_deployments_total",
            "Total number of mock deployments",
            ["status"],
        )

        # Cache
        self.cache_hits = Counter(
            "builder_cache_hits_total",
            "Total number of cache hits",
            ["cache_type"],
        )
        self.cache_misses = Counter(
            "builder_cache_misses_total",
            "Total number of cache misses",
            ["cache_type"],
        )

    def record_action(self, action: str, status: str, duration: float) -> None:
        self.action_executions_total.labels(action=action, status=status).inc()
        self.action_duration.labels(action=action).observe(duration)

    def record_generation(self, kind: str, status: str, duration: float) -> None:
        self.generation_requests_total.labels(kind=kind, status=status).inc()
        self.generation_duration.labels(kind=kind).observe(duration)

    def record_deployment(self, status: str) -> None:
        self.deployments_total.labels(status=status).inc()

    def record_cache(self, cache_type: str, hit: bool) -> None:
        counter = self.cache_hits if hit else self.cache_misses
        counter.labels(cache_type=cache_type).inc()

    def export(self) -> bytes:
        """Prometheus text exposition."""
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
