"""Runner for the table size exporter."""

import asyncio
import signal
import sys

from pydantic import ValidationError

from tablesize_exporter.adapters.snapshot_source.mysql import MySQLTableSizeSource
from tablesize_exporter.core.config import Settings, get_settings
from tablesize_exporter.core.exceptions import ListenerBindError
from tablesize_exporter.core.logging import LoggerConfigurator
from tablesize_exporter.core.logging import logger as global_logger
from tablesize_exporter.core.metrics_service import PrometheusMetricsService

EXIT_OK = 0
EXIT_BIND_FAILED = 1
EXIT_BAD_CONFIG = 2


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            pass


async def serve(settings: Settings, stop: asyncio.Event) -> int:
    """Run the refresher and the metrics server until ``stop`` is set.

    Returns:
        The process exit code.
    """
    logger = global_logger.with_context(component="runner")

    source = MySQLTableSizeSource.from_settings(settings)
    service = PrometheusMetricsService.create()
    try:
        try:
            await service.start(
                source=source,
                host=settings.METRICS_HOST,
                port=settings.METRICS_PORT,
                interval=settings.REFRESH_INTERVAL,
                stale_policy=settings.STALE_POLICY,
            )
        except ListenerBindError as e:
            logger.error(f"Error starting metrics server: {e}")
            return EXIT_BIND_FAILED

        logger.info(
            f"Refreshing table sizes every {settings.REFRESH_INTERVAL}s "
            f"(stale policy: {settings.STALE_POLICY.value})"
        )
        await stop.wait()
        logger.info("Shutdown requested, stopping exporter")
        return EXIT_OK
    finally:
        await service.stop()
        await source.dispose()


async def main() -> int:
    """Load settings, configure logging and serve until signalled."""
    try:
        settings = get_settings()
    except ValidationError as e:
        LoggerConfigurator.configure()
        global_logger.error(f"Invalid configuration: {e}")
        return EXIT_BAD_CONFIG

    LoggerConfigurator.configure(
        level=settings.LOG_LEVEL, local_development=settings.LOCAL_DEVELOPMENT
    )
    stop = asyncio.Event()
    _install_signal_handlers(stop)
    return await serve(settings, stop)


def run() -> None:
    """Console script entrypoint."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
