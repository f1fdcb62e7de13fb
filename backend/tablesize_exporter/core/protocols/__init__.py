"""Core protocols for dependency injection.

The refresher and the metrics service depend on these protocols; the
concrete MySQL and Prometheus implementations live under ``adapters``.
"""

from tablesize_exporter.core.protocols.metrics_renderer import MetricsRenderer
from tablesize_exporter.core.protocols.refresh_metrics import RefreshMetrics
from tablesize_exporter.core.protocols.snapshot_source import SnapshotSource

__all__ = [
    "MetricsRenderer",
    "RefreshMetrics",
    "SnapshotSource",
]
