"""
Metrics Collection
Prometheus metrics for generation, caching and repair
"""

from prometheus_client import Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the generation core.
    """

    def __init__(self) -> None:
        # Generation metrics
        self.generations_total = Counter(
            "selfgen_generations_total",
            "Total number of generation runs",
            ["path", "outcome"],
        )
        self.generation_duration = Histogram(
            "selfgen_generation_duration_seconds",
            "Generation duration in seconds",
            ["path"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
        )

        # Pipeline metrics
        self.pipeline_steps_total = Counter(
            "selfgen_pipeline_steps_total",
            "Pipeline step outcomes",
            ["step", "status"],
        )
        self.pipeline_retries_total = Counter(
            "selfgen_pipeline_retries_total",
            "Pipeline step retries",
            ["step"],
        )

        # LLM metrics
        self.llm_calls_total = Counter(
            "selfgen_llm_calls_total",
            "Total number of LLM API calls",
            ["model", "status"],
        )
        self.llm_duration = Histogram(
            "selfgen_llm_duration_seconds",
            "LLM API call duration in seconds",
            ["model"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
        )

        # Cache metrics
        self.cache_hits = Counter(
            "selfgen_cache_hits_total",
            "Total number of cache hits",
            ["cache_type"],
        )
        self.cache_misses = Counter(
            "selfgen_cache_misses_total",
            "Total number of cache misses",
            ["cache_type"],
        )
        self.coalesced_total = Counter(
            "selfgen_coalesced_requests_total",
            "Triggers that joined an in-flight generation",
        )

        # Tree metrics
        self.tree_nodes = Gauge(
            "selfgen_tree_nodes",
            "Addressable nodes in the live tree",
        )
        self.placements_total = Counter(
            "selfgen_placements_total",
            "Tree placements",
            ["kind", "applied"],
        )

        # Repair metrics
        self.repairs_total = Counter(
            "selfgen_repairs_total",
            "Repair attempts by strategy and outcome",
            ["strategy", "status"],
        )
        self.repair_queue_depth = Gauge(
            "selfgen_repair_queue_depth",
            "Repairs waiting in the queue",
        )

        # Error metrics
        self.errors_total = Counter(
            "selfgen_errors_total",
            "Total number of errors",
            ["error_type", "component"],
        )

    def record_generation(self, path: str, outcome: str, duration: float) -> None:
        """Record a pipeline or fallback generation."""
        self.generations_total.labels(path=path, outcome=outcome).inc()
        self.generation_duration.labels(path=path).observe(duration)

    def record_step(self, step: str, status: str, retries: int = 0) -> None:
        """Record a pipeline step outcome."""
        self.pipeline_steps_total.labels(step=step, status=status).inc()
        if retries:
            self.pipeline_retries_total.labels(step=step).inc(retries)

    def record_llm_call(self, model: str, status: str, duration: float) -> None:
        """Record an LLM API call."""
        self.llm_calls_total.labels(model=model, status=status).inc()
        self.llm_duration.labels(model=model).observe(duration)

    def record_cache_hit(self, cache_type: str) -> None:
        """Record a cache hit."""
        self.cache_hits.labels(cache_type=cache_type).inc()

    def record_cache_miss(self, cache_type: str) -> None:
        """Record a cache miss."""
        self.cache_misses.labels(cache_type=cache_type).inc()

    def record_coalesced(self) -> None:
        self.coalesced_total.inc()

    def record_placement(self, kind: str, applied: bool) -> None:
        """Record a placement and whether it reached its target."""
        self.placements_total.labels(kind=kind, applied=str(applied).lower()).inc()

    def set_tree_nodes(self, count: int) -> None:
        self.tree_nodes.set(count)

    def record_repair(self, strategy: str, status: str) -> None:
        """Record a repair attempt."""
        self.repairs_total.labels(strategy=strategy, status=status).inc()

    def set_repair_queue_depth(self, depth: int) -> None:
        self.repair_queue_depth.set(depth)

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
