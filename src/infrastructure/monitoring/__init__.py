"""Monitoring infrastructure: Prometheus metrics for the facilitation core."""

from src.infrastructure.monitoring.facilitation_metrics import (
    FacilitationMetricsCollector,
    get_facilitation_metrics_collector,
    reset_facilitation_metrics_collector,
)

__all__: list[str] = [
    "FacilitationMetricsCollector",
    "get_facilitation_metrics_collector",
    "reset_facilitation_metrics_collector",
]
