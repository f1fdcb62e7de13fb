"""Value objects shared between sources, the registry and the refresher."""

from tablesize_exporter.schemas.table_size import GaugeKey, MetricSample, Snapshot

__all__ = ["GaugeKey", "MetricSample", "Snapshot"]
