"""Sidecar HTTP server exposing ``/metrics`` and ``/health``."""

from typing import Optional

from aiohttp import web

from tablesize_exporter.core.exceptions import ListenerBindError
from tablesize_exporter.core.logging import logger
from tablesize_exporter.core.protocols.metrics_renderer import MetricsRenderer


class MetricsServer:
    """aiohttp server that renders the current metrics on every scrape.

    Handlers only read through the renderer, so any number of scrapes can
    run alongside the refresher.
    """

    def __init__(self, renderer: MetricsRenderer, port: int = 9100, host: str = "0.0.0.0"):
        """Initialize the metrics server.

        Args:
            renderer: Serializes the collected metrics.
            port: The port to listen on.
            host: The host to listen on.
        """
        self._renderer = renderer
        self.host = host
        self.port = port
        self.app = web.Application()
        self.app.add_routes(
            [
                web.get("/metrics", self.metrics_handler),
                web.get("/health", self.health_handler),
            ]
        )
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(component="metrics_server")

    async def metrics_handler(self, request: web.Request) -> web.Response:
        """Serialize the current registry contents."""
        body = self._renderer.generate()
        return web.Response(
            body=body,
            status=200,
            headers={"Content-Type": self._renderer.content_type},
        )

    async def health_handler(self, request: web.Request) -> web.Response:
        """Liveness probe: the process is up and serving."""
        return web.json_response({"status": "healthy"})

    async def start(self) -> None:
        """Bind the listening socket and start serving.

        Raises:
            ListenerBindError: If the address cannot be bound.
        """
        self.runner = web.AppRunner(self.app, access_log=None)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, host=self.host, port=self.port)
        try:
            await self.site.start()
        except OSError as e:
            await self.runner.cleanup()
            self.runner = None
            self.site = None
            raise ListenerBindError(f"could not bind {self.host}:{self.port}: {e}") from e
        self.logger.info(
            f"Starting MySQL Table Size Exporter on http://{self.host}:{self.port}/metrics"
        )

    async def stop(self) -> None:
        """Stops the server gracefully."""
        if self.site:
            await self.site.stop()
            self.site = None
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
