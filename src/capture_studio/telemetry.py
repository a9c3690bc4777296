"""OpenTelemetry instrumentation for the capture API.

Tracing is opt-in (``OTEL_ENABLED=true``) and exports spans over gRPC OTLP.
The FastAPI app is a Starlette app, so the Starlette instrumentor is used.
"""

import logging

from starlette.applications import Starlette

from .config.settings import settings

logger = logging.getLogger(__name__)


def init_telemetry(app: Starlette) -> bool:
    """Instrument ``app`` if tracing is enabled; return whether it was."""
    if not settings.otel_enabled:
        logger.debug("OpenTelemetry tracing disabled (OTEL_ENABLED=false)")
        return False

    if not settings.otel_endpoint:
        logger.warning(
            "OTEL_ENABLED=true but OTEL_EXPORTER_OTLP_ENDPOINT not set. "
            "Skipping OpenTelemetry initialization."
        )
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.instrumentation.starlette import StarletteInstrumentor
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.semconv.resource import ResourceAttributes
    except ImportError as e:
        logger.error(
            f"OpenTelemetry packages not installed: {e}. "
            "Install with: pip install 'capture-studio[telemetry]'"
        )
        return False

    resource = Resource.create({ResourceAttributes.SERVICE_NAME: settings.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_endpoint, insecure=True))
    )
    trace.set_tracer_provider(provider)
    StarletteInstrumentor.instrument_app(app)
    logger.info(
        f"OpenTelemetry initialized: service={settings.otel_service_name}, "
        f"endpoint={settings.otel_endpoint}"
    )
    return True


def shutdown_telemetry() -> None:
    """Flush and shut down the tracer provider."""
    if not settings.otel_enabled:
        return

    from opentelemetry import trace

    provider = trace.get_tracer_provider()
    if hasattr(provider, "shutdown"):
        provider.shutdown()
        logger.info("OpenTelemetry tracer provider shut down")
