"""Prometheus exporter for MySQL table storage sizes."""

__version__ = "0.1.0"
