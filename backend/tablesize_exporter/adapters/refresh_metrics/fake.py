"""Fake RefreshMetrics for testing.

Records every observation so tests can assert on refresh outcomes without
reaching into prometheus-client internals.
"""

from dataclasses import dataclass

from tablesize_exporter.core.protocols.refresh_metrics import RefreshMetrics


@dataclass
class SuccessRecord:
    """Single successful cycle."""

    duration: float
    tables: int
    skipped_rows: int
    tracked: int


@dataclass
class FailureRecord:
    """Single skipped cycle."""

    duration: float
    reason: str


class FakeRefreshMetrics(RefreshMetrics):
    """In-memory spy implementing the RefreshMetrics protocol."""

    def __init__(self) -> None:
        self.successes: list[SuccessRecord] = []
        self.failures: list[FailureRecord] = []

    def observe_success(
        self,
        *,
        duration: float,
        tables: int,
        skipped_rows: int,
        tracked: int,
    ) -> None:
        self.successes.append(SuccessRecord(duration, tables, skipped_rows, tracked))

    def observe_failure(self, *, duration: float, reason: str) -> None:
        self.failures.append(FailureRecord(duration, reason))

    # -- test helpers --

    @property
    def cycles(self) -> int:
        return len(self.successes) + len(self.failures)

    def clear(self) -> None:
        """Reset all recorded state."""
        self.successes.clear()
        self.failures.clear()
