"""OpenTelemetry wiring for the relay app."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from payrelay.common.config import RelaySettings


def setup_tracing(config: RelaySettings) -> None:
    """Register a tracer provider; spans leave the process only when an OTLP endpoint is set."""

    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    if config.otel_exporter_otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otel_exporter_otlp_endpoint))
        )
    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI) -> None:
    # Health and metrics probes would drown out payment spans.
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,metrics")
