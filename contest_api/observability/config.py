"""
OpenTelemetry Configuration

Sets up distributed tracing and logging for the contest administration
service based on environment configuration.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

SAMPLING_RATIOS = {
    'production': 0.1,
    'staging': 0.5,
}


def setup_observability(settings: Optional[Settings] = None) -> Optional[TracerProvider]:
    """Initialize OpenTelemetry instrumentation and logging."""
    settings = settings or get_settings()
    environment = settings.environment

    setup_structured_logging(environment, settings.log_level)

    if not settings.otel_enabled:
        # Spans fall back to the no-op tracer
        return None

    sampler = TraceIdRatioBased(SAMPLING_RATIOS.get(environment, 1.0))

    resource = Resource.create({
        "service.name": settings.service_name,
        "service.version": settings.service_version,
        "deployment.environment": environment
    })

    tracer_provider = TracerProvider(
        sampler=sampler,
        resource=resource
    )

    if settings.otel_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_endpoint), max_export_batch_size=512)
        )
    elif environment == 'development':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)
    logger.info(
        "Tracing configured",
        extra={"environment": environment, "otlp_endpoint": settings.otel_endpoint or None}
    )
    return tracer_provider


def setup_structured_logging(environment: str, log_level: str = ''):
    """Configure logging levels per environment."""
    level = logging.getLevelName(log_level.upper()) if log_level else None
    if not isinstance(level, int):
        level = {
            'production': logging.WARNING,
            'staging': logging.INFO,
            'development': logging.DEBUG
        }.get(environment, logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        # Reduce driver noise
        logging.getLogger('pymongo').setLevel(logging.WARNING)
    elif environment == 'development':
        logging.getLogger('contest_api.domain').setLevel(logging.DEBUG)
        logging.getLogger('contest_api.services').setLevel(logging.DEBUG)
