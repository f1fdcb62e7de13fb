"""Fake SnapshotSource for testing.

Serves queued snapshots or errors in order so tests can drive the
refresher cycle by cycle without a database.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from tablesize_exporter.core.protocols.snapshot_source import SnapshotSource
from tablesize_exporter.schemas.table_size import MetricSample, Snapshot


class FakeSnapshotSource(SnapshotSource):
    """In-memory source returning canned outcomes.

    Usage:
        fake = FakeSnapshotSource("app")
        fake.push([MetricSample(scope="app", name="users", value=1024)])
        fake.push_error(QueryError("boom"))
        snapshot = await fake.fetch()
        assert fake.fetch_calls == 1

    Once the queue is drained the last outcome is repeated.
    """

    def __init__(self, name: str = "fake", *, delay: float = 0.0) -> None:
        self._name = name
        self._delay = delay
        self._outcomes: list[Snapshot | BaseException] = []
        self._last: Snapshot | BaseException = Snapshot()
        self.fetch_calls: int = 0
        self.in_flight: int = 0
        self.max_in_flight: int = 0

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self) -> Snapshot:
        self.fetch_calls += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            if self._outcomes:
                self._last = self._outcomes.pop(0)
            if isinstance(self._last, BaseException):
                raise self._last
            return self._last
        finally:
            self.in_flight -= 1

    # -- test helpers --

    def push(self, samples: Iterable[MetricSample], *, skipped_rows: int = 0) -> None:
        """Queue a successful snapshot."""
        self._outcomes.append(Snapshot(samples=tuple(samples), skipped_rows=skipped_rows))

    def push_error(self, error: BaseException) -> None:
        """Queue a failing fetch."""
        self._outcomes.append(error)

    def clear(self) -> None:
        """Reset all recorded state."""
        self._outcomes.clear()
        self._last = Snapshot()
        self.fetch_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
