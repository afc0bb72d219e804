"""
FastAPI application factories for the producer and consumer roles
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from order_events.api import events, health, operational, publish
from order_events.core.config import Settings, get_settings
from order_events.core.errors import register_error_handlers
from order_events.core.logger import configure_logging, logger
from order_events.core.metrics import ConsumerMetrics, HttpMetrics, ProducerMetrics
from order_events.core.telemetry import instrument_app
from order_events.events.handlers import LoggingOrderEventHandler, OrderEventHandler
from order_events.middleware import RequestLoggingMiddleware, RequestTimingMiddleware
from order_events.services.publisher import OrderPublisher


def _lifespan(settings: Settings, role: str, metadata: dict):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"{settings.service_name} {role} started",
            metadata={
                "service_name": settings.service_name,
                "version": settings.service_version,
                "environment": settings.environment,
                "role": role,
                "port": settings.port,
                **metadata,
            },
        )
        yield
        logger.info(f"Shutting down {settings.service_name} {role}")

    return lifespan


def _base_app(
    settings: Settings, role: str, title: str, metrics: HttpMetrics, metadata: dict
) -> FastAPI:
    app = FastAPI(
        title=title,
        version=settings.service_version,
        lifespan=_lifespan(settings, role, metadata),
    )
    app.state.settings = settings
    app.state.metrics = metrics

    register_error_handlers(app)

    # Last added runs first: timing wraps the request logger
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestTimingMiddleware, metrics=metrics)

    app.include_router(health.router)
    app.include_router(operational.router)

    if settings.enable_tracing:
        instrument_app(app)
    return app


def create_producer_app(
    settings: Optional[Settings] = None,
    publisher: Optional[OrderPublisher] = None,
    registry: Optional[CollectorRegistry] = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = _base_app(
        settings,
        "producer",
        "Order Producer",
        ProducerMetrics(registry),
        {"pubsub": settings.dapr_pubsub_name, "topic": settings.dapr_topic_name},
    )
    app.state.publisher = publisher or OrderPublisher(
        settings.publish_url, timeout=settings.publish_timeout_seconds
    )
    app.include_router(publish.router)
    return app


def create_consumer_app(
    settings: Optional[Settings] = None,
    handler: Optional[OrderEventHandler] = None,
    registry: Optional[CollectorRegistry] = None,
) -> FastAPI:
    settings = settings or get_settings()
    subscription = settings.subscription
    app = _base_app(
        settings,
        "consumer",
        "Order Consumer",
        ConsumerMetrics(registry),
        subscription.model_dump(),
    )
    app.state.event_handler = handler or LoggingOrderEventHandler()
    app.include_router(events.build_router(subscription))
    return app


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application selected by SERVICE_ROLE"""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)
    if settings.service_role == "consumer":
        return create_consumer_app(settings)
    return create_producer_app(settings)
