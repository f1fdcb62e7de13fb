"""Prometheus-backed metrics service.

Composes the table size registry, the refresh self-metrics, the renderer,
the sidecar HTTP server and the refresher behind a single lifecycle API so
callers (main.py, tests) deal with one object instead of five.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry

from tablesize_exporter.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer
from tablesize_exporter.adapters.refresh_metrics.prometheus import PrometheusRefreshMetrics
from tablesize_exporter.core.config import StalePolicy
from tablesize_exporter.core.protocols.metrics_renderer import MetricsRenderer
from tablesize_exporter.core.protocols.refresh_metrics import RefreshMetrics
from tablesize_exporter.core.protocols.snapshot_source import SnapshotSource
from tablesize_exporter.core.refresher import DEFAULT_INTERVAL
from tablesize_exporter.core.table_size_registry import TableSizeRegistry

if TYPE_CHECKING:
    from tablesize_exporter.api.metrics import MetricsServer
    from tablesize_exporter.core.refresher import TableSizeRefresher


class PrometheusMetricsService:
    """Facade that owns the registry, the metrics adapters and both background services.

    The registry is created here once and shared by reference between the
    refresher (sole writer) and the renderer (reader).
    """

    table_sizes: TableSizeRegistry
    refresh: RefreshMetrics

    def __init__(
        self,
        table_sizes: TableSizeRegistry,
        refresh: RefreshMetrics,
        renderer: MetricsRenderer,
    ) -> None:
        self.table_sizes = table_sizes
        self.refresh = refresh
        self._renderer = renderer
        self._server: MetricsServer | None = None
        self._refresher: TableSizeRefresher | None = None

    @classmethod
    def create(cls) -> "PrometheusMetricsService":
        """Wire fresh Prometheus adapters on a dedicated CollectorRegistry."""
        registry = CollectorRegistry()
        table_sizes = TableSizeRegistry()
        renderer = PrometheusMetricsRenderer(table_sizes, registry=registry)
        refresh = PrometheusRefreshMetrics(registry=registry)
        return cls(table_sizes=table_sizes, refresh=refresh, renderer=renderer)

    async def start(
        self,
        *,
        source: SnapshotSource,
        host: str,
        port: int,
        interval: float = DEFAULT_INTERVAL,
        stale_policy: StalePolicy = StalePolicy.keep,
    ) -> None:
        """Start the sidecar metrics server, then the refresher.

        Raises:
            ListenerBindError: If the server cannot bind; the refresher is
                not started in that case.
        """
        from tablesize_exporter.api.metrics import MetricsServer
        from tablesize_exporter.core.refresher import TableSizeRefresher

        self._server = MetricsServer(self._renderer, port, host)
        await self._server.start()
        self._refresher = TableSizeRefresher(
            source,
            self.table_sizes,
            self.refresh,
            interval=interval,
            stale_policy=stale_policy,
        )
        await self._refresher.start()

    async def stop(self) -> None:
        """Stop refresher then sidecar (reverse start order)."""
        try:
            if self._refresher:
                await self._refresher.stop()
        finally:
            if self._server:
                await self._server.stop()
