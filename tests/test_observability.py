"""
Tests for the Observability Module — Metrics and log formatting.
"""

import json
import logging

from blobcache.backends.memory import MemoryBackend
from blobcache.logging_config import HumanFormatter, JSONFormatter, format_context, setup_logging, store_context
from blobcache.store import StoreFacade
from blobcache.observability.metrics import Counter, Histogram, MetricsRegistry


class TestCounter:
    """Tests for Counter metric."""

    def test_increment(self):
        counter = Counter("test_counter")

        counter.inc()
        counter.inc(5)

        assert counter.get() == 6

    def test_labels_tracked_separately(self):
        counter = Counter("test_counter")

        counter.inc(1, labels={"backend": "memory"})
        counter.inc(2, labels={"backend": "http"})

        assert counter.get(labels={"backend": "memory"}) == 1
        assert counter.get(labels={"backend": "http"}) == 2
        assert counter.total() == 3

    def test_export_restores_labels(self):
        counter = Counter("test_counter")
        counter.inc(3, labels={"backend": "json_file", "operation": "save"})

        points = counter.export()

        assert len(points) == 1
        assert points[0].labels == {"backend": "json_file", "operation": "save"}


class TestHistogram:
    """Tests for Histogram metric."""

    def test_buckets_are_cumulative(self):
        histogram = Histogram("save_seconds", buckets=(0.1, 1, float("inf")))

        histogram.observe(0.05)
        histogram.observe(0.5)
        histogram.observe(5)

        buckets = {p.labels["le"]: p.value for p in histogram.export() if p.name.endswith("_bucket")}
        assert buckets == {"0.1": 1, "1": 2, "+Inf": 3}

    def test_summary(self):
        histogram = Histogram("save_seconds")
        histogram.observe(0.25)
        histogram.observe(0.75)

        assert histogram.summary() == {"sum": 1.0, "count": 2}


class TestMetricsRegistry:
    """Tests for MetricsRegistry."""

    def test_common_metrics_registered(self):
        output = MetricsRegistry().export_prometheus()

        assert "# TYPE blobcache_backend_saves_total counter" in output
        assert "# TYPE blobcache_backend_save_seconds histogram" in output

    def test_prometheus_labels(self):
        registry = MetricsRegistry()
        registry.increment("backend_saves_total", labels={"backend": "memory"})

        output = registry.export_prometheus()

        assert 'blobcache_backend_saves_total{backend="memory"} 1' in output

    def test_export_json(self):
        registry = MetricsRegistry()
        registry.increment("backend_loads_total", 2)
        registry.timing("backend_save_seconds", 0.5)

        data = registry.export_json()

        assert data["counters"]["blobcache_backend_loads_total"] == 2
        assert data["histograms"]["blobcache_backend_save_seconds"]["count"] == 1
        json.dumps(data)

    def test_reset(self):
        registry = MetricsRegistry()
        registry.increment("backend_loads_total")

        registry.reset()

        assert registry.counter("backend_loads_total").total() == 0


class TestLogging:
    """Tests for log formatters and setup."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord("blobcache.store", logging.WARNING, __file__, 1, "Backend save failed", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_formatter_includes_extras(self):
        line = JSONFormatter().format(self._record(backend="http", operation="save"))
        entry = json.loads(line)

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "blobcache.store"
        assert entry["backend"] == "http"
        assert entry["operation"] == "save"
        assert "store_key" not in entry

    def test_human_formatter(self):
        line = HumanFormatter().format(self._record())

        assert "[store" in line
        assert "Backend save failed" in line

    def test_store_context_omits_unset_fields(self):
        assert store_context("http") == {"backend": "http"}
        assert store_context("http", "set", "token") == {
            "backend": "http",
            "operation": "set",
            "store_key": "token",
        }

    def test_human_formatter_appends_context(self):
        line = HumanFormatter().format(self._record(**store_context("json_file", "remove", "k")))

        assert line.endswith("Backend save failed (json_file:remove key='k')")

    def test_format_context_empty_without_backend(self):
        assert format_context(self._record()) == ""

    def test_store_logs_keys_never_values(self, caplog):
        store = StoreFacade(MemoryBackend())

        with caplog.at_level(logging.DEBUG, logger="blobcache.store"):
            store.set("token", "s3cr3t-value")

        set_records = [r for r in caplog.records if r.getMessage() == "Set 'token'"]
        assert len(set_records) == 1
        assert set_records[0].store_key == "token"
        assert set_records[0].operation == "set"
        assert "s3cr3t-value" not in caplog.text

    def test_setup_logging_json(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging(level="debug", format_type="json")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
