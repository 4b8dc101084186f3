"""
Observability Module — Backend traffic metrics.
"""

from .metrics import Counter, Histogram, MetricsRegistry, metrics

__all__ = [
    "metrics",
    "MetricsRegistry",
    "Counter",
    "Histogram",
]
