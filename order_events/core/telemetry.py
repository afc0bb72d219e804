"""
OpenTelemetry instrumentation for the order events services

Works alongside Dapr: the sidecar propagates trace context and exports spans,
this module only creates spans for local operations.
"""

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.trace import SpanKind

from order_events.core.logger import logger

TRACER_NAME = "order_events"


def get_tracer():
    return trace.get_tracer(TRACER_NAME)


def instrument_app(app) -> None:
    """
    Instrument a FastAPI application and the HTTPX client with OpenTelemetry.

    Instrumentation failures are logged and never prevent startup.
    """
    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumented with OpenTelemetry")

        instrumentor = HTTPXClientInstrumentor()
        if not instrumentor.is_instrumented_by_opentelemetry:
            instrumentor.instrument()
            logger.info("HTTPX client instrumented with OpenTelemetry")
    except Exception as e:
        logger.error("Failed to instrument application", error=e)


def consumer_span(name: str, attributes: dict = None):
    """Context manager for a CONSUMER span that becomes the current span"""
    return get_tracer().start_as_current_span(name, kind=SpanKind.CONSUMER, attributes=attributes)
