"""Thread-safe store of the latest table size per (table, database).

The refresher is the only writer; the metrics collector reads a copy on
every scrape.  Entries are never expired on their own: a table that
disappears keeps reporting its last known size unless the caller asks
``apply`` to drop missing keys.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from tablesize_exporter.schemas.table_size import GaugeKey, MetricSample


class TableSizeRegistry:
    """Mapping of ``GaugeKey`` to the last written size, guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[GaugeKey, float] = {}

    def set(self, key: GaugeKey, value: float) -> None:
        """Upsert a single series (last write wins)."""
        with self._lock:
            self._values[key] = float(value)

    def apply(self, samples: Iterable[MetricSample], *, drop_missing: bool = False) -> int:
        """Write a whole snapshot atomically.

        Readers see either the state before or after the call, never a mix.
        With ``drop_missing`` every key not present in ``samples`` is
        removed.  An empty ``samples`` never removes anything.

        Returns:
            The number of entries removed.
        """
        updates = {sample.key: float(sample.value) for sample in samples}
        with self._lock:
            removed = 0
            if drop_missing and updates:
                stale = [key for key in self._values if key not in updates]
                for key in stale:
                    del self._values[key]
                removed = len(stale)
            self._values.update(updates)
            return removed

    def snapshot_all(self) -> dict[GaugeKey, float]:
        """Return a copy of every tracked series."""
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
