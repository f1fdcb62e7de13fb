"""Fake MetricsRenderer for testing.

Serves a fixed body and counts scrapes, so server tests need neither a
registry nor prometheus-client.
"""

from tablesize_exporter.core.protocols.metrics_renderer import MetricsRenderer


class FakeMetricsRenderer(MetricsRenderer):
    """In-memory spy implementing the MetricsRenderer protocol."""

    def __init__(self, body: bytes = b"# fake metrics\n") -> None:
        self.body = body
        self.generate_calls: int = 0

    @property
    def content_type(self) -> str:
        return "text/plain; charset=utf-8"

    def generate(self) -> bytes:
        self.generate_calls += 1
        return self.body
