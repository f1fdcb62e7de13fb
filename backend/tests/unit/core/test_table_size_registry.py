"""Unit tests for the thread-safe table size registry."""

import threading

from tablesize_exporter.core.table_size_registry import TableSizeRegistry
from tablesize_exporter.schemas.table_size import GaugeKey, MetricSample


def _sample(name: str, value: float, scope: str = "app") -> MetricSample:
    return MetricSample(scope=scope, name=name, value=value)


# ---------------------------------------------------------------------------
# set / snapshot_all
# ---------------------------------------------------------------------------


class TestSet:
    """Tests for single-key upserts."""

    def test_last_write_wins(self):
        registry = TableSizeRegistry()
        key = GaugeKey(name="users", scope="app")

        registry.set(key, 1.0)
        registry.set(key, 2.0)

        assert registry.snapshot_all() == {key: 2.0}

    def test_same_name_in_different_scopes_are_distinct(self):
        registry = TableSizeRegistry()
        registry.set(GaugeKey(name="users", scope="app"), 1.0)
        registry.set(GaugeKey(name="users", scope="billing"), 2.0)

        assert len(registry) == 2

    def test_snapshot_is_a_copy(self):
        registry = TableSizeRegistry()
        key = GaugeKey(name="users", scope="app")
        registry.set(key, 1.0)

        snapshot = registry.snapshot_all()
        snapshot[key] = 99.0
        snapshot[GaugeKey(name="ghost", scope="app")] = 1.0

        assert registry.snapshot_all() == {key: 1.0}

    def test_values_are_stored_as_float(self):
        registry = TableSizeRegistry()
        key = GaugeKey(name="users", scope="app")
        registry.set(key, 1024)

        assert isinstance(registry.snapshot_all()[key], float)


# ---------------------------------------------------------------------------
# apply
# ---------------------------------------------------------------------------


class TestApply:
    """Tests for whole-snapshot application."""

    def test_apply_upserts_every_sample(self):
        registry = TableSizeRegistry()
        registry.apply([_sample("users", 1024), _sample("orders", 2048)])

        assert registry.snapshot_all() == {
            GaugeKey(name="users", scope="app"): 1024.0,
            GaugeKey(name="orders", scope="app"): 2048.0,
        }

    def test_keep_preserves_vanished_tables(self):
        registry = TableSizeRegistry()
        registry.apply([_sample("users", 1), _sample("orders", 2)])

        removed = registry.apply([_sample("users", 5)])

        assert removed == 0
        assert registry.snapshot_all() == {
            GaugeKey(name="users", scope="app"): 5.0,
            GaugeKey(name="orders", scope="app"): 2.0,
        }

    def test_drop_missing_removes_vanished_tables(self):
        registry = TableSizeRegistry()
        registry.apply([_sample("users", 1), _sample("orders", 2)])

        removed = registry.apply([_sample("users", 5)], drop_missing=True)

        assert removed == 1
        assert registry.snapshot_all() == {GaugeKey(name="users", scope="app"): 5.0}

    def test_empty_apply_never_clears(self):
        registry = TableSizeRegistry()
        registry.apply([_sample("users", 1)])

        assert registry.apply([], drop_missing=True) == 0
        assert registry.apply([]) == 0
        assert registry.snapshot_all() == {GaugeKey(name="users", scope="app"): 1.0}


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    """Registry behaviour under concurrent writers and readers."""

    def test_concurrent_sets_on_distinct_keys_are_not_lost(self):
        registry = TableSizeRegistry()
        writers = 8
        per_writer = 500

        def write(worker: int) -> None:
            for i in range(per_writer):
                registry.set(GaugeKey(name=f"t{i}", scope=f"s{worker}"), float(i))

        threads = [threading.Thread(target=write, args=(w,)) for w in range(writers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = registry.snapshot_all()
        assert len(snapshot) == writers * per_writer
        assert snapshot[GaugeKey(name="t499", scope="s7")] == 499.0

    def test_readers_never_observe_a_partial_cycle(self):
        """Every key carries the cycle number; a snapshot must be uniform."""
        registry = TableSizeRegistry()
        names = [f"table_{i}" for i in range(200)]
        registry.apply([_sample(n, 0) for n in names])
        done = threading.Event()
        mixed: list[set[float]] = []

        def write() -> None:
            for cycle in range(1, 200):
                registry.apply([_sample(n, cycle) for n in names])
            done.set()

        def read() -> None:
            while not done.is_set():
                values = set(registry.snapshot_all().values())
                if len(values) != 1:
                    mixed.append(values)

        reader = threading.Thread(target=read)
        writer = threading.Thread(target=write)
        reader.start()
        writer.start()
        writer.join()
        reader.join()

        assert mixed == []
        assert set(registry.snapshot_all().values()) == {199.0}
