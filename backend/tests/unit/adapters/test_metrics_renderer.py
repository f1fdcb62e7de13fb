"""Unit tests for the metrics renderer adapters."""

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry

from tablesize_exporter.adapters.metrics_renderer import (
    TABLE_SIZE_METRIC,
    FakeMetricsRenderer,
    PrometheusMetricsRenderer,
)
from tablesize_exporter.core.table_size_registry import TableSizeRegistry
from tablesize_exporter.schemas.table_size import GaugeKey


def _table_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith(f"{TABLE_SIZE_METRIC}{{")]


class TestFakeMetricsRenderer:
    """Tests for the FakeMetricsRenderer test helper."""

    def test_generate_counts_calls(self):
        fake = FakeMetricsRenderer(b"x 1\n")

        assert fake.generate() == b"x 1\n"
        assert fake.generate_calls == 1


class TestPrometheusMetricsRenderer:
    """Tests for the Prometheus renderer and its table size collector."""

    def test_registry_is_separate_from_default(self):
        renderer = PrometheusMetricsRenderer(TableSizeRegistry())
        assert renderer.registry is not REGISTRY

    def test_uses_supplied_registry(self):
        registry = CollectorRegistry()
        renderer = PrometheusMetricsRenderer(TableSizeRegistry(), registry=registry)
        assert renderer.registry is registry

    def test_content_type_is_prometheus_format(self):
        renderer = PrometheusMetricsRenderer(TableSizeRegistry())
        assert renderer.content_type == CONTENT_TYPE_LATEST
        assert renderer.content_type.startswith("text/plain")

    def test_empty_registry_renders_family_header_only(self):
        output = PrometheusMetricsRenderer(TableSizeRegistry()).generate().decode()

        assert f"# TYPE {TABLE_SIZE_METRIC} gauge" in output
        assert _table_lines(output) == []

    def test_one_line_per_table_with_labels(self):
        table_sizes = TableSizeRegistry()
        table_sizes.set(GaugeKey(name="users", scope="app"), 1024)
        table_sizes.set(GaugeKey(name="users", scope="billing"), 512)
        renderer = PrometheusMetricsRenderer(table_sizes)

        registry = renderer.registry
        labels = {"table_name": "users"}

        assert len(_table_lines(renderer.generate().decode())) == 2
        assert (
            registry.get_sample_value(TABLE_SIZE_METRIC, {**labels, "database_name": "app"})
            == 1024.0
        )
        assert (
            registry.get_sample_value(TABLE_SIZE_METRIC, {**labels, "database_name": "billing"})
            == 512.0
        )

    def test_reflects_registry_changes_between_scrapes(self):
        table_sizes = TableSizeRegistry()
        renderer = PrometheusMetricsRenderer(table_sizes)
        key = GaugeKey(name="users", scope="app")

        table_sizes.set(key, 1)
        first = renderer.generate().decode()
        table_sizes.set(key, 2)
        second = renderer.generate().decode()

        assert _table_lines(first)[0].endswith(" 1.0")
        assert _table_lines(second)[0].endswith(" 2.0")
