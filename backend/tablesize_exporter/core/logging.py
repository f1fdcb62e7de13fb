"""Logging setup.

Every component logs through a ``ContextualLogger``.  ``with_context``
returns a child adapter carrying extra dimensions, which the JSON formatter
flattens into each record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

_ROOT_NAME = "tablesize_exporter"

# LogRecord attributes that are not user supplied context.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound dimensions into every record."""

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a logger bound to the current and the given dimensions."""
        merged = dict(self.extra or {})
        merged.update(dimensions)
        return ContextualLogger(self.logger, merged)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, context dimensions at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                data[key] = value
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class ContextFormatter(logging.Formatter):
    """Human readable formatter for local development."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-8s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED and not k.startswith("_")
        }
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        return line


class LoggerConfigurator:
    """Configures the exporter's root logger and hands out contextual loggers."""

    @staticmethod
    def configure(level: str = "INFO", local_development: bool = False) -> None:
        """Install a single stdout handler on the exporter's root logger."""
        root = logging.getLogger(_ROOT_NAME)
        for handler in list(root.handlers):
            root.removeHandler(handler)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ContextFormatter() if local_development else JSONFormatter())
        root.addHandler(handler)
        root.setLevel(level)
        root.propagate = False

    @staticmethod
    def configure_logger(
        name: str, dimensions: Optional[dict[str, Any]] = None
    ) -> ContextualLogger:
        """Return a contextual logger below the exporter's root logger.

        Args:
            name: Logger name, usually ``__name__``.
            dimensions: Context attached to every record of this logger.
        """
        if name != _ROOT_NAME and not name.startswith(f"{_ROOT_NAME}."):
            name = f"{_ROOT_NAME}.{name}"
        return ContextualLogger(logging.getLogger(name), dict(dimensions or {}))


logger = LoggerConfigurator.configure_logger(_ROOT_NAME)
