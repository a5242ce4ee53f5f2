"""Optional OTLP export plus the span wrapped around each compilation."""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

tracer = trace.get_tracer("sasscmd")

_configured = False


def parse_headers(raw: str | None) -> dict[str, str] | None:
    """Parse ``key=value,key=value`` OTLP header strings."""
    if not raw:
        return None
    result: dict[str, str] = {}
    for pair in (item.strip() for item in raw.split(",")):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        result[key.strip()] = value.strip()
    return result or None


def configure_tracing(
    app, service_name: str, endpoint: str | None, headers: str | None
) -> bool:
    """Install an OTLP exporter once and instrument ``app``.

    Returns False when tracing stays off (no endpoint, or already set up).
    """
    global _configured
    if _configured or not endpoint:
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=endpoint, headers=parse_headers(headers))
        )
    )
    trace.set_tracer_provider(provider)
    FastAPIInstrumentor.instrument_app(app)
    _configured = True
    return True
