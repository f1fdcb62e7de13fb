"""MetricsRenderer protocol for the scrape endpoint.

The HTTP server only needs a body and its MIME type; which collectors feed
that body (table sizes, refresh self-metrics) is decided when the service
is wired.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsRenderer(Protocol):
    """Produces the response of one ``GET /metrics`` request."""

    @property
    def content_type(self) -> str:
        """Value of the response ``Content-Type`` header."""
        ...

    def generate(self) -> bytes:
        """Serialize the current value of every exported series.

        Called once per scrape and must not mutate collected state.
        """
        ...
