"""Refresh metrics adapters."""

from tablesize_exporter.adapters.refresh_metrics.fake import FakeRefreshMetrics
from tablesize_exporter.adapters.refresh_metrics.prometheus import PrometheusRefreshMetrics

__all__ = ["PrometheusRefreshMetrics", "FakeRefreshMetrics"]
