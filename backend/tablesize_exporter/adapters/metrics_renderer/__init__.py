"""Metrics renderer adapters."""

from tablesize_exporter.adapters.metrics_renderer.fake import FakeMetricsRenderer
from tablesize_exporter.adapters.metrics_renderer.prometheus import (
    TABLE_SIZE_METRIC,
    PrometheusMetricsRenderer,
    TableSizeCollector,
)

__all__ = [
    "FakeMetricsRenderer",
    "PrometheusMetricsRenderer",
    "TABLE_SIZE_METRIC",
    "TableSizeCollector",
]
