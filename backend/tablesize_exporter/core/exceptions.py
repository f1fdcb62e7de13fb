"""Exporter exception hierarchy.

Per-cycle errors (``SnapshotSourceError`` and ``RowDecodeError``) are
recovered inside the refresher.  ``ListenerBindError`` is the only error
that terminates the process.
"""


class ExporterError(Exception):
    """Base class for all exporter errors."""


class SnapshotSourceError(ExporterError):
    """A snapshot could not be fetched; the refresh cycle is skipped."""


class SourceConnectionError(SnapshotSourceError):
    """The data source could not be reached or failed its liveness check."""


class QueryError(SnapshotSourceError):
    """The connection was established but the size query failed or timed out."""


class RowDecodeError(ExporterError):
    """A single result row could not be interpreted as a table size."""


class ListenerBindError(ExporterError):
    """The metrics endpoint could not bind its listening address."""
