"""
Metrics — Backend traffic counters and save latency.

Tracks how often the facade actually reaches the durable backend, which
is the cost the cache exists to minimize. Exposed in Prometheus text
format or as JSON.

## Usage

    from blobcache.observability.metrics import metrics

    metrics.increment("backend_saves_total", labels={"backend": "json_file"})
    metrics.timing("backend_save_seconds", 0.004)

    output = metrics.export_prometheus()
"""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional


@dataclass
class MetricPoint:
    """A single metric data point."""

    name: str
    value: float
    timestamp: float
    labels: Dict[str, str] = field(default_factory=dict)


def _labels_key(labels: Optional[Dict[str, str]]) -> str:
    if not labels:
        return ""
    return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))


def _parse_labels_key(key: str) -> Dict[str, str]:
    labels: Dict[str, str] = {}
    if key:
        for pair in key.split(","):
            k, v = pair.split("=", 1)
            labels[k] = v
    return labels


class Counter:
    """A monotonically increasing counter."""

    def __init__(self, name: str, help_text: str = ""):
        self.name = name
        self.help_text = help_text
        self._values: Dict[str, float] = defaultdict(float)
        self._lock = Lock()

    def inc(self, value: float = 1, labels: Optional[Dict[str, str]] = None) -> None:
        key = _labels_key(labels)
        with self._lock:
            self._values[key] += value

    def get(self, labels: Optional[Dict[str, str]] = None) -> float:
        return self._values.get(_labels_key(labels), 0)

    def total(self) -> float:
        """Sum across all label sets."""
        with self._lock:
            return sum(self._values.values())

    def export(self) -> List[MetricPoint]:
        now = time.time()
        with self._lock:
            items = list(self._values.items())
        return [MetricPoint(self.name, value, now, _parse_labels_key(key)) for key, value in items]


class Histogram:
    """A histogram for timing distributions."""

    DEFAULT_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, float("inf"))

    def __init__(self, name: str, help_text: str = "", buckets: Optional[tuple] = None):
        self.name = name
        self.help_text = help_text
        self.buckets = buckets or self.DEFAULT_BUCKETS
        self._counts: Dict[str, Dict[float, int]] = defaultdict(lambda: defaultdict(int))
        self._sums: Dict[str, float] = defaultdict(float)
        self._totals: Dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def observe(self, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        key = _labels_key(labels)
        with self._lock:
            self._sums[key] += value
            self._totals[key] += 1
            # Each observation lands in the first bucket that holds it;
            # export() accumulates.
            for bucket in self.buckets:
                if value <= bucket:
                    self._counts[key][bucket] += 1
                    break

    def summary(self) -> Dict[str, float]:
        """Sum and count across all label sets."""
        with self._lock:
            return {
                "sum": sum(self._sums.values()),
                "count": sum(self._totals.values()),
            }

    def export(self) -> List[MetricPoint]:
        points = []
        now = time.time()

        with self._lock:
            for key in sorted(self._totals):
                labels = _parse_labels_key(key)

                cumulative = 0
                for bucket in self.buckets:
                    cumulative += self._counts[key].get(bucket, 0)
                    le = "+Inf" if bucket == float("inf") else str(bucket)
                    points.append(MetricPoint(f"{self.name}_bucket", cumulative, now, {**labels, "le": le}))

                points.append(MetricPoint(f"{self.name}_sum", self._sums[key], now, labels))
                points.append(MetricPoint(f"{self.name}_count", self._totals[key], now, labels))

        return points


class MetricsRegistry:
    """
    Central registry for all metrics.

    Metric names are stored with the registry prefix applied.
    """

    def __init__(self, prefix: str = "blobcache"):
        self.prefix = prefix
        self._counters: Dict[str, Counter] = {}
        self._histograms: Dict[str, Histogram] = {}
        self._lock = Lock()

        self._register_common_metrics()

    def _register_common_metrics(self) -> None:
        self.counter("backend_loads_total", "Full-document loads from the durable backend")
        self.counter("backend_saves_total", "Full-document saves to the durable backend")
        self.counter("saves_skipped_total", "Mutations that needed no backend save")
        self.counter("backend_errors_total", "Failed backend loads and saves")
        self.histogram("backend_save_seconds", "Full-document save duration")

    def counter(self, name: str, help_text: str = "") -> Counter:
        """Get or create a counter."""
        full_name = f"{self.prefix}_{name}"
        with self._lock:
            if full_name not in self._counters:
                self._counters[full_name] = Counter(full_name, help_text)
            return self._counters[full_name]

    def histogram(self, name: str, help_text: str = "") -> Histogram:
        """Get or create a histogram."""
        full_name = f"{self.prefix}_{name}"
        with self._lock:
            if full_name not in self._histograms:
                self._histograms[full_name] = Histogram(full_name, help_text)
            return self._histograms[full_name]

    def increment(self, name: str, value: float = 1, labels: Optional[Dict[str, str]] = None) -> None:
        self.counter(name).inc(value, labels)

    def timing(self, name: str, seconds: float, labels: Optional[Dict[str, str]] = None) -> None:
        self.histogram(name).observe(seconds, labels)

    def reset(self) -> None:
        """Drop all recorded values and re-register the defaults."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
        self._register_common_metrics()

    def export_prometheus(self) -> str:
        """Export metrics in Prometheus text format."""
        lines = []

        for counter in self._counters.values():
            lines.append(f"# HELP {counter.name} {counter.help_text}")
            lines.append(f"# TYPE {counter.name} counter")
            for point in counter.export():
                lines.append(f"{point.name}{self._format_labels(point.labels)} {point.value}")

        for histogram in self._histograms.values():
            lines.append(f"# HELP {histogram.name} {histogram.help_text}")
            lines.append(f"# TYPE {histogram.name} histogram")
            for point in histogram.export():
                lines.append(f"{point.name}{self._format_labels(point.labels)} {point.value}")

        return "\n".join(lines)

    def export_json(self) -> Dict[str, Any]:
        """Export metrics as JSON, totals summed across labels."""
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "counters": {name: c.total() for name, c in self._counters.items()},
            "histograms": {name: h.summary() for name, h in self._histograms.items()},
        }

    def _format_labels(self, labels: Dict[str, str]) -> str:
        if not labels:
            return ""
        pairs = [f'{k}="{v}"' for k, v in sorted(labels.items())]
        return "{" + ",".join(pairs) + "}"


# Global metrics instance
metrics = MetricsRegistry()
