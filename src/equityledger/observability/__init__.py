"""Observability helpers."""

from equityledger.observability.metrics import MetricsRegistry, metrics

__all__ = ["MetricsRegistry", "metrics"]
