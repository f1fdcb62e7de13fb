"""Unit tests for contextual logging."""

import io
import json
import logging

import pytest

from tablesize_exporter.core.logging import (
    ContextFormatter,
    ContextualLogger,
    JSONFormatter,
    LoggerConfigurator,
)


@pytest.fixture
def captured():
    """Attach a string handler to a throwaway logger."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    base = logging.getLogger("tablesize_exporter.tests.logging")
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    base.propagate = False
    yield base, handler, stream
    base.removeHandler(handler)


class TestContextualLogger:
    """Tests for with_context and the formatters."""

    def test_configure_logger_nests_under_root(self):
        log = LoggerConfigurator.configure_logger("refresher")
        assert isinstance(log, ContextualLogger)
        assert log.logger.name == "tablesize_exporter.refresher"

    def test_with_context_merges_dimensions(self):
        log = LoggerConfigurator.configure_logger("x", {"component": "a"})
        child = log.with_context(source="app")

        assert child.extra == {"component": "a", "source": "app"}
        assert log.extra == {"component": "a"}

    def test_json_formatter_includes_dimensions(self, captured):
        base, handler, stream = captured
        handler.setFormatter(JSONFormatter())
        log = ContextualLogger(base, {}).with_context(component="refresher")

        log.info("updated 2 tables", extra={"skipped_rows": 1})
        record = json.loads(stream.getvalue())

        assert record["message"] == "updated 2 tables"
        assert record["level"] == "INFO"
        assert record["component"] == "refresher"
        assert record["skipped_rows"] == 1

    def test_json_formatter_includes_exception(self, captured):
        base, handler, stream = captured
        handler.setFormatter(JSONFormatter())
        log = ContextualLogger(base, {})

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("failed")

        assert "RuntimeError: boom" in json.loads(stream.getvalue())["exception"]

    def test_context_formatter_appends_dimensions(self, captured):
        base, handler, stream = captured
        handler.setFormatter(ContextFormatter())
        ContextualLogger(base, {"component": "runner"}).warning("hello")

        line = stream.getvalue().strip()
        assert "hello" in line
        assert line.endswith("component=runner")
