"""Snapshot source adapters."""

from tablesize_exporter.adapters.snapshot_source.fake import FakeSnapshotSource
from tablesize_exporter.adapters.snapshot_source.mysql import MySQLTableSizeSource

__all__ = ["MySQLTableSizeSource", "FakeSnapshotSource"]
