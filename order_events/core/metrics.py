"""
Prometheus metrics for the producer and consumer

Each application owns a CollectorRegistry so several apps (and tests) can
live in one process. prometheus_client metrics are lock-guarded, so
concurrent requests can increment and observe without lost updates.
"""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

REQUEST_DURATION_NAME = "http_server_requests_seconds"


class HttpMetrics:
    """Request latency histogram shared by both roles"""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.request_duration = Histogram(
            REQUEST_DURATION_NAME,
            "HTTP request duration in seconds.",
            labelnames=("method", "uri", "status"),
            registry=self.registry,
        )

    def observe_request(self, method: str, uri: str, status: int, duration_seconds: float) -> None:
        self.request_duration.labels(method=method, uri=uri, status=str(status)).observe(duration_seconds)

    def render(self) -> bytes:
        return generate_latest(self.registry)

    content_type = CONTENT_TYPE_LATEST


class ProducerMetrics(HttpMetrics):
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        super().__init__(registry)
        self.requests = Counter(
            "orders_publish_requests_total",
            "Total publish requests received by the producer.",
            registry=self.registry,
        )
        self.errors = Counter(
            "orders_publish_errors_total",
            "Total publish errors in the producer.",
            registry=self.registry,
        )
        self.published = Counter(
            "orders_published_total",
            "Total published order events from the producer.",
            registry=self.registry,
        )


class ConsumerMetrics(HttpMetrics):
    def __init__(self, registry: Optional[CollectorRegistry] = None):
        super().__init__(registry)
        self.requests = Counter(
            "orders_consume_requests_total",
            "Total consume requests received by the consumer.",
            registry=self.registry,
        )
        self.errors = Counter(
            "orders_consume_errors_total",
            "Total consume errors in the consumer.",
            registry=self.registry,
        )
        self.consumed = Counter(
            "orders_consumed_total",
            "Total consumed order events in the consumer.",
            registry=self.registry,
        )
