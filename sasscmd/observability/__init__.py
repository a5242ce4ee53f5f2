"""Logging, metrics and tracing wiring."""

from __future__ import annotations

from sasscmd.observability.logging import configure_logging
from sasscmd.observability.metrics import MetricsMiddleware, metrics_response

__all__ = [
    "configure_logging",
    "MetricsMiddleware",
    "metrics_response",
]
