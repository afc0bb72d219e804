"""
Middleware modules for the order events services
"""

from .metrics import RequestTimingMiddleware
from .trace_context import RequestLoggingMiddleware, get_request_logger, resolve_trace_context

__all__ = [
    "RequestLoggingMiddleware",
    "RequestTimingMiddleware",
    "get_request_logger",
    "resolve_trace_context",
]
