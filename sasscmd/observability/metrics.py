from __future__ import annotations

import time
from collections.abc import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_COUNTER = Counter(
    "sasscmd_request_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "sasscmd_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
)
COMPILE_COUNTER = Counter(
    "sasscmd_compile_total",
    "libsass compilations by origin kind and outcome",
    ["origin", "outcome"],
)
COMPILE_LATENCY = Histogram(
    "sasscmd_compile_duration_seconds",
    "Time spent inside libsass per compilation",
    ["origin"],
)
COMMAND_ERRORS = Counter(
    "sasscmd_command_errors_total",
    "sass command invocations rejected before or during compilation",
    ["code"],
)
START_TIMESTAMP = Gauge(
    "sasscmd_start_timestamp_seconds",
    "Unix timestamp of process start (set on import)",
)

START_TIMESTAMP.set_to_current_time()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        route = request.scope.get("route")
        path_template = getattr(route, "path", request.url.path)
        REQUEST_COUNTER.labels(
            request.method, path_template, response.status_code
        ).inc()
        REQUEST_LATENCY.labels(request.method, path_template).observe(duration)
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
