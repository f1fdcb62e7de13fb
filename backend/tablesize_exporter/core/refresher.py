"""Background refresher that copies table sizes into the registry.

One asyncio task runs the cycles back to back on a fixed period.  The first
cycle starts immediately; a cycle that overruns the interval delays the
next tick instead of overlapping with it, so at most one fetch is in flight.
"""

from __future__ import annotations

import asyncio
import time

from tablesize_exporter.core.config import StalePolicy
from tablesize_exporter.core.exceptions import QueryError, SourceConnectionError
from tablesize_exporter.core.logging import ContextualLogger, logger
from tablesize_exporter.core.protocols.refresh_metrics import RefreshMetrics
from tablesize_exporter.core.protocols.snapshot_source import SnapshotSource
from tablesize_exporter.core.table_size_registry import TableSizeRegistry

DEFAULT_INTERVAL = 30.0


class TableSizeRefresher:
    """Periodically fetches a snapshot and applies it to the registry.

    Fetch failures skip the cycle and leave every registry value untouched,
    so a scrape always sees the last known sizes.
    """

    def __init__(
        self,
        source: SnapshotSource,
        registry: TableSizeRegistry,
        metrics: RefreshMetrics,
        *,
        interval: float = DEFAULT_INTERVAL,
        stale_policy: StalePolicy = StalePolicy.keep,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._source = source
        self._registry = registry
        self._metrics = metrics
        self._interval = interval
        self._stale_policy = stale_policy
        self._task: asyncio.Task | None = None
        self._logger: ContextualLogger = logger.with_context(
            component="refresher", source=source.name
        )

    async def start(self) -> None:
        """Schedule the refresh loop; a no-op when already running."""
        if self._task is None:
            self._task = asyncio.create_task(self.run_forever(), name="table-size-refresher")

    async def stop(self) -> None:
        """Cancel the refresh loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def run_forever(self) -> None:
        """Run refresh cycles until cancelled."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            try:
                await self.refresh_once()
            except Exception:
                self._logger.exception("Unexpected error during table size refresh")

            next_tick += self._interval
            now = loop.time()
            if next_tick < now:
                # Overran the period: fire right away and re-anchor.
                next_tick = now
            await asyncio.sleep(next_tick - now)

    async def refresh_once(self) -> bool:
        """Run a single cycle.

        Returns:
            True when a snapshot was fetched and applied.
        """
        started = time.monotonic()
        try:
            snapshot = await self._source.fetch()
        except SourceConnectionError as e:
            self._logger.error(f"Could not connect to database: {e}")
            self._metrics.observe_failure(duration=time.monotonic() - started, reason="connection")
            return False
        except QueryError as e:
            self._logger.error(f"Error querying table sizes: {e}")
            self._metrics.observe_failure(duration=time.monotonic() - started, reason="query")
            return False
        except Exception:
            self._logger.exception("Unexpected error fetching table sizes")
            self._metrics.observe_failure(duration=time.monotonic() - started, reason="unexpected")
            return False

        removed = self._registry.apply(
            snapshot.samples, drop_missing=self._stale_policy is StalePolicy.drop
        )
        self._metrics.observe_success(
            duration=time.monotonic() - started,
            tables=len(snapshot),
            skipped_rows=snapshot.skipped_rows,
            tracked=len(self._registry),
        )

        self._logger.info(
            f"Successfully updated metrics for {len(snapshot)} tables "
            f"in database '{self._source.name}'.",
            extra={"skipped_rows": snapshot.skipped_rows, "removed": removed},
        )
        return True
