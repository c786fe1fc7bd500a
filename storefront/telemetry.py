"""OpenTelemetry tracing.

Spans cover incoming requests, SQL statements and outbound ``requests``
calls, the last of which includes the Twilio client used for SMS.
``OTEL_TRACES_EXPORTER`` picks where finished spans go: ``otlp``,
``console`` or ``none``. With ``none`` spans are still created so request
logs and the ``traceparent`` response header carry real trace ids.
"""
import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db

logger = logging.getLogger(__name__)


def span_exporter(config):
    kind = (config.get("OTEL_TRACES_EXPORTER") or "none").lower()
    if kind == "otlp":
        return OTLPSpanExporter(endpoint=config.get("OTEL_EXPORTER_OTLP_ENDPOINT"))
    if kind == "console":
        return ConsoleSpanExporter()
    if kind != "none":
        logger.warning("Unknown OTEL_TRACES_EXPORTER %r, spans will not be exported", kind)
    return None


def init_tracing(app):
    service_name = app.config.get("OTEL_SERVICE_NAME", "candle-craft-storefront")
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    exporter = span_exporter(app.config)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app)
    requests_instrumentor = RequestsInstrumentor()
    if not requests_instrumentor.is_instrumented_by_opentelemetry:
        requests_instrumentor.instrument()
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)
