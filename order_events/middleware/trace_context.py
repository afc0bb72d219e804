"""
Trace context resolution and request-scoped logging

Derives a (trace_id, span_id) pair from inbound headers, W3C traceparent
first and B3 / X-Request-ID second, purely for log correlation. The
resolved context never influences routing or response content.
"""

import re
from typing import Mapping, NamedTuple, Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from order_events.core.logger import StructuredLogger, logger as root_logger

UNKNOWN = "unknown"

_TRACE_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")
_SPAN_ID_RE = re.compile(r"^[0-9a-fA-F]{16}$")


class TraceContext(NamedTuple):
    trace_id: str
    span_id: str


def extract_trace_context(traceparent: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Extract trace id and span id from a W3C traceparent header
    Format: {version}-{32-hex-traceId}-{16-hex-spanId}-{flags}

    Returns:
        Tuple of lower-cased (trace_id, span_id) or None if invalid
    """
    if not traceparent:
        return None

    parts = traceparent.strip().split("-")
    if len(parts) != 4:
        return None

    trace_id, span_id = parts[1], parts[2]
    if not _TRACE_ID_RE.match(trace_id) or not _SPAN_ID_RE.match(span_id):
        return None
    if trace_id == "0" * 32 or span_id == "0" * 16:
        return None

    return trace_id.lower(), span_id.lower()


def _first_non_blank(headers: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = (headers.get(name) or "").strip()
        if value:
            return value
    return None


def resolve_trace_context(headers: Mapping[str, str]) -> TraceContext:
    """Resolve the trace context of a request from its headers"""
    # Plain dicts are matched case-insensitively like Starlette's Headers
    headers = {key.lower(): value for key, value in headers.items()}

    parsed = extract_trace_context(headers.get("traceparent"))
    if parsed:
        return TraceContext(*parsed)

    trace_id = _first_non_blank(headers, "x-b3-traceid", "x-request-id") or UNKNOWN
    span_id = _first_non_blank(headers, "x-b3-spanid") or UNKNOWN
    return TraceContext(trace_id.lower(), span_id.lower())


def get_request_logger(request: Request) -> StructuredLogger:
    """FastAPI dependency returning the logger bound by RequestLoggingMiddleware"""
    return getattr(request.state, "logger", None) or root_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Resolves the trace context once per request and stores a logger
    carrying traceId, spanId, method and path on ``request.state``.
    """

    def __init__(self, app, logger: StructuredLogger = None):
        super().__init__(app)
        self.logger = logger or root_logger

    async def dispatch(self, request: Request, call_next):
        trace_context = resolve_trace_context(request.headers)

        request.state.trace_context = trace_context
        request.state.logger = self.logger.bind(
            traceId=trace_context.trace_id,
            spanId=trace_context.span_id,
            method=request.method,
            path=request.url.path,
        )

        return await call_next(request)
