"""Shared test fixtures"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from order_events.app import create_consumer_app, create_producer_app
from order_events.core.config import Settings
from order_events.services.publisher import OrderPublisher

PUBLISH_URL = "http://localhost:3500/v1.0/publish/order-pubsub/orders"


class RecordingTransport(httpx.AsyncBaseTransport):
    """httpx transport that records outbound requests and answers with a fixed status"""

    def __init__(self, status_code: int = 204, error: Exception = None):
        self.status_code = status_code
        self.error = error
        self.requests = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, request=request)

    def sent_json(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    """Settings isolated from the process environment and .env files"""
    return Settings(_env_file=None, enable_tracing=False)


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def publisher(transport):
    return OrderPublisher(PUBLISH_URL, timeout=5.0, transport=transport)


@pytest.fixture
def producer_app(settings, publisher, registry):
    return create_producer_app(settings, publisher=publisher, registry=registry)


@pytest.fixture
def producer_client(producer_app):
    with TestClient(producer_app) as client:
        yield client


@pytest.fixture
def consumer_app(settings, registry):
    return create_consumer_app(settings, registry=registry)


@pytest.fixture
def consumer_client(consumer_app):
    with TestClient(consumer_app) as client:
        yield client


@pytest.fixture
def metric_value(registry):
    """Current sample value of the app registry, 0.0 when the sample does not exist yet"""

    def read(name: str, labels: dict = None) -> float:
        return registry.get_sample_value(name, labels or {}) or 0.0

    return read


@pytest.fixture
def make_transport():
    return RecordingTransport
