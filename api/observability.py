"""OpenTelemetry and structlog configuration for SmartNote."""

import logging
import os

import structlog
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

# Service identification
SERVICE_NAME_VALUE = os.getenv("OTEL_SERVICE_NAME", "smartnote-api")
SERVICE_VERSION_VALUE = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service attributes."""
    return Resource.create(
        {
            SERVICE_NAME: SERVICE_NAME_VALUE,
            SERVICE_VERSION: SERVICE_VERSION_VALUE,
            "deployment.environment": ENVIRONMENT,
        }
    )


def _env_enabled(name: str) -> bool:
    return os.getenv(name, "true").lower() == "true"


def _select_exporter(signal: str, otlp_cls, console_cls):
    """Pick the exporter for a signal ("traces" or "metrics") from OTEL_* settings.

    Returns None when export is disabled or the OTLP endpoint is missing.
    """
    exporter_type = os.getenv(f"OTEL_{signal.upper()}_EXPORTER", "console")

    if exporter_type == "otlp":
        otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        if not otlp_endpoint:
            print(f"[OTEL] OTLP endpoint not configured, {signal} disabled")
            return None
        print(f"[OTEL] Using OTLP {signal} exporter: {otlp_endpoint}")
        return otlp_cls(endpoint=otlp_endpoint)

    if exporter_type == "console":
        print(f"[OTEL] Using console {signal} exporter for development")
        return console_cls()

    # 'none' or any other value disables export
    print(f"[OTEL] {signal.capitalize()} export disabled")
    return None


def configure_tracing() -> TracerProvider:
    """Configure OpenTelemetry tracing."""
    provider = TracerProvider(resource=get_resource())

    if _env_enabled("OTEL_ENABLE_TRACES"):
        span_exporter = _select_exporter("traces", OTLPSpanExporter, ConsoleSpanExporter)
        if span_exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(span_exporter))
    else:
        print("[OTEL] Tracing disabled via OTEL_ENABLE_TRACES=false")

    trace.set_tracer_provider(provider)
    return provider


def configure_metrics() -> MeterProvider:
    """Configure OpenTelemetry metrics."""
    metric_readers = []

    if _env_enabled("OTEL_ENABLE_METRICS"):
        metric_exporter = _select_exporter("metrics", OTLPMetricExporter, ConsoleMetricExporter)
        if metric_exporter is not None:
            metric_readers.append(
                PeriodicExportingMetricReader(
                    metric_exporter,
                    export_interval_millis=int(os.getenv("OTEL_METRIC_EXPORT_INTERVAL", "60000")),
                )
            )
    else:
        print("[OTEL] Metrics disabled via OTEL_ENABLE_METRICS=false")

    provider = MeterProvider(resource=get_resource(), metric_readers=metric_readers)
    metrics.set_meter_provider(provider)
    return provider


def add_otel_context(logger, method_name, event_dict):
    """Add OpenTelemetry trace context to log events."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    else:
        event_dict["trace_id"] = "0" * 32
        event_dict["span_id"] = "0" * 16
    return event_dict


def configure_logging():
    """Configure structlog with OpenTelemetry integration."""
    log_level = os.getenv("OTEL_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("LOG_FORMAT", "json").lower()  # json or console

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level),
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_otel_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger()
    logger.info("logging_configured", log_level=log_level, log_format=log_format)


def initialize_observability():
    """Initialize logging, tracing and metrics."""
    configure_logging()

    logger = structlog.get_logger()
    logger.info("initializing_observability")

    tracer_provider = configure_tracing()
    meter_provider = configure_metrics()

    logger.info(
        "observability_initialized",
        service_name=SERVICE_NAME_VALUE,
        service_version=SERVICE_VERSION_VALUE,
        environment=ENVIRONMENT,
    )

    return tracer_provider, meter_provider


def get_tracer(name: str = __name__) -> trace.Tracer:
    """Get a tracer instance for creating spans."""
    return trace.get_tracer(name, SERVICE_VERSION_VALUE)


def get_meter(name: str = __name__) -> metrics.Meter:
    """Get a meter instance for creating metrics."""
    return metrics.get_meter(name, SERVICE_VERSION_VALUE)


class AppMetrics:
    """Application-specific metrics."""

    def __init__(self):
        meter = get_meter("smartnote.metrics")

        self.notes_created = meter.create_counter(
            name="notes.created", description="Total number of notes created", unit="1"
        )

        self.notes_deleted = meter.create_counter(
            name="notes.deleted", description="Total number of notes deleted", unit="1"
        )

        self.persistence_failures = meter.create_counter(
            name="persistence.failures",
            description="Blob store writes that failed and left changes unsaved",
            unit="1",
        )

        self.ai_requests = meter.create_counter(
            name="ai.requests",
            description="AI assistant requests by operation (summarize, translate, chat)",
            unit="1",
        )

        self.ai_failures = meter.create_counter(
            name="ai.failures", description="AI assistant requests that failed", unit="1"
        )

        self.ai_duration = meter.create_histogram(
            name="ai.request.duration",
            description="AI assistant request duration in milliseconds",
            unit="ms",
        )


# Global metrics instance
app_metrics: AppMetrics | None = None


def get_app_metrics() -> AppMetrics:
    """Get the global application metrics instance."""
    global app_metrics
    if app_metrics is None:
        app_metrics = AppMetrics()
    return app_metrics
