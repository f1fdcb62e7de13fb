"""MySQL implementation of the SnapshotSource protocol.

Reads ``DATA_LENGTH + INDEX_LENGTH`` per table from
``information_schema.TABLES``.  Each fetch opens its own connection
(``NullPool``) and closes it on every exit path, so a stuck connection is
discarded instead of being handed to the next cycle.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import URL, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from tablesize_exporter.core.config import Settings
from tablesize_exporter.core.exceptions import QueryError, RowDecodeError, SourceConnectionError
from tablesize_exporter.core.logging import ContextualLogger, logger
from tablesize_exporter.schemas.table_size import MetricSample, Snapshot

DEFAULT_PORT = 3306

TABLE_SIZE_QUERY = text(
    """
    SELECT
        TABLE_SCHEMA AS database_name,
        TABLE_NAME AS table_name,
        (DATA_LENGTH + INDEX_LENGTH) AS size
    FROM information_schema.TABLES
    WHERE (DATA_LENGTH + INDEX_LENGTH) > 0
    """
)

_PING = text("SELECT 1")

# Driver-level failures that surface outside SQLAlchemy's exception wrapping.
_DRIVER_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def split_host(host: str) -> tuple[Optional[str], int]:
    """Split ``host[:port]`` into its parts.

    An empty host yields ``None`` so the driver falls back to localhost.
    """
    host = host.strip()
    if not host:
        return None, DEFAULT_PORT
    if host.startswith("["):
        address, _, rest = host[1:].partition("]")
        port = rest.lstrip(":")
        return address, int(port) if port.isdigit() else DEFAULT_PORT
    address, sep, port = host.rpartition(":")
    if sep and port.isdigit() and ":" not in address:
        return address, int(port)
    return host, DEFAULT_PORT


def build_url(settings: Settings) -> URL:
    """Build the ``mysql+aiomysql`` URL from the DB_* settings."""
    host, port = split_host(settings.DB_HOST)
    return URL.create(
        "mysql+aiomysql",
        username=settings.DB_USER or None,
        password=settings.DB_PASSWORD or None,
        host=host,
        port=port,
        database=settings.DB_NAME or None,
    )


def _label(value: Any, column: str) -> str:
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise RowDecodeError(f"{column} is not valid UTF-8") from e
    if not isinstance(value, str) or not value:
        raise RowDecodeError(f"{column} must be a non-empty string, got {value!r}")
    return value


def decode_row(row: Sequence[Any]) -> MetricSample:
    """Turn a ``(database, table, size)`` row into a sample.

    Raises:
        RowDecodeError: If the row has the wrong shape or an unusable value.
    """
    try:
        database_name, table_name, size = row
    except (TypeError, ValueError) as e:
        raise RowDecodeError(f"expected 3 columns, got {row!r}") from e

    scope = _label(database_name, "database_name")
    name = _label(table_name, "table_name")

    if size is None or isinstance(size, bool):
        raise RowDecodeError(f"size of {scope}.{name} is {size!r}")
    try:
        value = float(Decimal(str(size)))
    except (InvalidOperation, ValueError) as e:
        raise RowDecodeError(f"size of {scope}.{name} is not numeric: {size!r}") from e
    if not math.isfinite(value) or value < 0:
        raise RowDecodeError(f"size of {scope}.{name} is out of range: {size!r}")

    return MetricSample(scope=scope, name=name, value=value)


class MySQLTableSizeSource:
    """Fetches table sizes from a MySQL server's system catalog."""

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        database: str = "",
        connect_timeout: float = 10.0,
        query_timeout: float = 20.0,
    ) -> None:
        self._engine = engine
        self._database = database
        self._connect_timeout = connect_timeout
        self._query_timeout = query_timeout
        self._logger: ContextualLogger = logger.with_context(
            component="snapshot_source", database=database
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "MySQLTableSizeSource":
        """Create a source with its own non-pooling engine."""
        engine = create_async_engine(
            build_url(settings),
            poolclass=NullPool,
            connect_args={"connect_timeout": max(1, math.ceil(settings.CONNECT_TIMEOUT))},
        )
        return cls(
            engine,
            database=settings.DB_NAME,
            connect_timeout=settings.CONNECT_TIMEOUT,
            query_timeout=settings.QUERY_TIMEOUT,
        )

    @property
    def name(self) -> str:
        return self._database

    async def fetch(self) -> Snapshot:
        async with self._connection() as conn:
            try:
                result = await asyncio.wait_for(
                    conn.execute(TABLE_SIZE_QUERY), timeout=self._query_timeout
                )
                rows = result.all()
            except asyncio.TimeoutError as e:
                raise QueryError(
                    f"table size query timed out after {self._query_timeout}s"
                ) from e
            except _DRIVER_ERRORS as e:
                raise QueryError(f"table size query failed: {e}") from e

        samples: list[MetricSample] = []
        skipped = 0
        for row in rows:
            try:
                samples.append(decode_row(row))
            except RowDecodeError as e:
                skipped += 1
                self._logger.warning(f"Skipping undecodable row: {e}")
        return Snapshot(samples=tuple(samples), skipped_rows=skipped)

    async def dispose(self) -> None:
        """Release the engine."""
        await self._engine.dispose()

    async def _open(self) -> AsyncConnection:
        return await self._engine.connect()

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Open and ping a connection, closing it however the block exits."""
        try:
            conn = await asyncio.wait_for(self._open(), timeout=self._connect_timeout)
        except _DRIVER_ERRORS as e:
            raise SourceConnectionError(f"could not connect to database: {e}") from e

        try:
            try:
                await asyncio.wait_for(conn.execute(_PING), timeout=self._connect_timeout)
            except _DRIVER_ERRORS as e:
                raise SourceConnectionError(f"database liveness check failed: {e}") from e
            yield conn
        finally:
            try:
                await conn.close()
            except Exception as e:
                self._logger.error(f"Error closing database connection: {e}")
