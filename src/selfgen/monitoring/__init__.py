"""
Performance Monitoring
Prometheus-based metrics collection for the generation core
"""

from ..core.tracing import trace_operation_async
from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
    "trace_operation_async",
]
