"""RefreshMetrics protocol for refresher self-instrumentation.

Makes refresh health visible to the collector: whether the last cycle
succeeded, when the last success happened, how long cycles take and how
often they fail.  Production uses Prometheus; tests inject a fake that
records observations in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RefreshMetrics(Protocol):
    """Protocol for recording the outcome of refresh cycles."""

    def observe_success(
        self,
        *,
        duration: float,
        tables: int,
        skipped_rows: int,
        tracked: int,
    ) -> None:
        """Record a completed cycle.

        Args:
            duration: Wall time of the cycle in seconds.
            tables: Samples applied to the registry.
            skipped_rows: Rows that failed to decode and were skipped.
            tracked: Series held by the registry after the cycle.
        """
        ...

    def observe_failure(self, *, duration: float, reason: str) -> None:
        """Record a skipped cycle.

        Args:
            duration: Wall time until the failure in seconds.
            reason: Short failure category, e.g. ``connection`` or ``query``.
        """
        ...
