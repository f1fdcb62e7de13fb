"""Prometheus implementation of the RefreshMetrics protocol.

Uses a caller-supplied CollectorRegistry so the self-metrics are served
alongside the table sizes on the same ``/metrics`` endpoint.
"""

import time

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from tablesize_exporter.core.protocols.refresh_metrics import RefreshMetrics

_PREFIX = "mysql_table_storage_exporter"

_DURATION_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)


class PrometheusRefreshMetrics(RefreshMetrics):
    """Prometheus-backed refresh cycle metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._last_success = Gauge(
            f"{_PREFIX}_last_refresh_success",
            "Whether the most recent refresh cycle succeeded (1) or was skipped (0)",
            registry=self._registry,
        )

        self._last_success_timestamp = Gauge(
            f"{_PREFIX}_last_refresh_success_timestamp_seconds",
            "Unix time of the most recent successful refresh cycle",
            registry=self._registry,
        )

        self._duration = Histogram(
            f"{_PREFIX}_refresh_duration_seconds",
            "Duration of refresh cycles in seconds",
            buckets=_DURATION_BUCKETS,
            registry=self._registry,
        )

        self._errors_total = Counter(
            f"{_PREFIX}_refresh_errors_total",
            "Refresh cycles skipped because the snapshot could not be fetched",
            ["reason"],
            registry=self._registry,
        )

        self._skipped_rows_total = Counter(
            f"{_PREFIX}_skipped_rows_total",
            "Catalog rows skipped because they could not be decoded",
            registry=self._registry,
        )

        self._tables = Gauge(
            f"{_PREFIX}_tables",
            "Number of table size series currently exported",
            registry=self._registry,
        )

        self._last_refresh_tables = Gauge(
            f"{_PREFIX}_last_refresh_tables",
            "Tables reported by the most recent successful refresh cycle",
            registry=self._registry,
        )

    # -- RefreshMetrics protocol methods --

    def observe_success(
        self,
        *,
        duration: float,
        tables: int,
        skipped_rows: int,
        tracked: int,
    ) -> None:
        self._last_success.set(1)
        self._last_success_timestamp.set(time.time())
        self._duration.observe(duration)
        if skipped_rows:
            self._skipped_rows_total.inc(skipped_rows)
        self._last_refresh_tables.set(tables)
        self._tables.set(tracked)

    def observe_failure(self, *, duration: float, reason: str) -> None:
        self._last_success.set(0)
        self._duration.observe(duration)
        self._errors_total.labels(reason=reason).inc()
