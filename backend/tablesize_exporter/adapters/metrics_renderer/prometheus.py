"""Prometheus implementation of the MetricsRenderer protocol.

Table sizes are exposed through a custom collector rather than a ``Gauge``
so that each scrape serializes one consistent copy of the registry, taken
under its lock, instead of reading series one by one while a refresh
cycle may be writing.
"""

from collections.abc import Iterator

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from tablesize_exporter.core.protocols.metrics_renderer import MetricsRenderer
from tablesize_exporter.core.table_size_registry import TableSizeRegistry

TABLE_SIZE_METRIC = "mysql_table_storage_bytes"
_TABLE_SIZE_HELP = "The size of the MySQL table in bytes (Data_length + Index_length)."
_LABELS = ["table_name", "database_name"]


class TableSizeCollector(Collector):
    """Serializes a TableSizeRegistry as one gauge family."""

    def __init__(self, table_sizes: TableSizeRegistry) -> None:
        self._table_sizes = table_sizes

    def describe(self) -> Iterator[GaugeMetricFamily]:
        yield GaugeMetricFamily(TABLE_SIZE_METRIC, _TABLE_SIZE_HELP, labels=_LABELS)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        family = GaugeMetricFamily(TABLE_SIZE_METRIC, _TABLE_SIZE_HELP, labels=_LABELS)
        snapshot = self._table_sizes.snapshot_all()
        for key in sorted(snapshot, key=lambda k: (k.scope, k.name)):
            family.add_metric([key.name, key.scope], snapshot[key])
        yield family


class PrometheusMetricsRenderer(MetricsRenderer):
    """Render the table sizes and every other collector in one registry.

    The registry is private to this renderer (never the process-wide
    default) so tests and multiple service instances stay isolated.
    """

    def __init__(
        self,
        table_sizes: TableSizeRegistry,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._registry = registry or CollectorRegistry()
        self._registry.register(TableSizeCollector(table_sizes))

    @property
    def registry(self) -> CollectorRegistry:
        """Registry that additional metric adapters should register on."""
        return self._registry

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def generate(self) -> bytes:
        return generate_latest(self._registry)
