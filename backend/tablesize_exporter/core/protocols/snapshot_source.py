"""SnapshotSource protocol for table size readers.

A source runs one query per call and returns the sizes it found.  It owns
no state between calls, so the refresher can treat every cycle as an
independent overwrite pass.
"""

from typing import Protocol, runtime_checkable

from tablesize_exporter.schemas.table_size import Snapshot


@runtime_checkable
class SnapshotSource(Protocol):
    """Protocol for a single table size data source."""

    @property
    def name(self) -> str:
        """Scope name reported in refresh log lines."""
        ...

    async def fetch(self) -> Snapshot:
        """Read the current table sizes.

        Rows that cannot be decoded are skipped and counted in
        ``Snapshot.skipped_rows`` rather than failing the fetch.

        Raises:
            SourceConnectionError: The source is unreachable or not alive.
            QueryError: The size query failed or timed out.
        """
        ...
