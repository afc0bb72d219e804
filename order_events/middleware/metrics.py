"""
Request timing middleware
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from order_events.core.metrics import HttpMetrics


def route_label(request: Request) -> str:
    """Matched route template (e.g. /orders), else the raw path"""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Observes http_server_requests_seconds{method,uri,status} for every
    request, including requests whose handler raised (recorded as 500).
    """

    def __init__(self, app, metrics: HttpMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            self.metrics.observe_request(
                request.method,
                route_label(request),
                status_code,
                time.perf_counter() - start_time,
            )
