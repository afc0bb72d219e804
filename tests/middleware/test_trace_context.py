"""Unit tests for trace context resolution and request logging middleware"""
from unittest.mock import Mock

import pytest
from starlette.datastructures import Headers

from order_events.core.logger import logger as root_logger
from order_events.middleware.trace_context import (
    UNKNOWN,
    RequestLoggingMiddleware,
    TraceContext,
    extract_trace_context,
    get_request_logger,
    resolve_trace_context,
)

TRACEPARENT = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"


class TestExtractTraceContext:
    """Test W3C traceparent parsing"""

    def test_valid_traceparent(self):
        assert extract_trace_context(TRACEPARENT) == (
            "4bf92f3577b34da6a3ce929d0e0e4736",
            "00f067aa0ba902b7",
        )

    def test_upper_case_is_normalized(self):
        assert extract_trace_context(TRACEPARENT.upper()) == (
            "4bf92f3577b34da6a3ce929d0e0e4736",
            "00f067aa0ba902b7",
        )

    def test_surrounding_whitespace_is_ignored(self):
        assert extract_trace_context(f"  {TRACEPARENT} ") is not None

    @pytest.mark.parametrize(
        "traceparent",
        [
            None,
            "",
            "garbage",
            "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7",
            "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01-extra",
            "00-4bf92f3577b34da6a3ce929d0e0e473-00f067aa0ba902b7-01",
            "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b-01",
            "00-4bf92f3577b34da6a3ce929d0e0e473z-00f067aa0ba902b7-01",
            "00-00000000000000000000000000000000-00f067aa0ba902b7-01",
            "00-4bf92f3577b34da6a3ce929d0e0e4736-0000000000000000-01",
        ],
    )
    def test_invalid_traceparent(self, traceparent):
        assert extract_trace_context(traceparent) is None


class TestResolveTraceContext:
    """Test header precedence when resolving the trace context"""

    def test_traceparent_wins(self):
        headers = {
            "traceparent": TRACEPARENT,
            "x-b3-traceid": "aaaaaaaaaaaaaaaa",
            "x-b3-spanid": "bbbbbbbbbbbbbbbb",
        }

        assert resolve_trace_context(headers) == TraceContext(
            "4bf92f3577b34da6a3ce929d0e0e4736", "00f067aa0ba902b7"
        )

    def test_zero_trace_id_falls_back_to_b3(self):
        headers = {
            "traceparent": "00-00000000000000000000000000000000-00f067aa0ba902b7-01",
            "X-B3-TraceId": "ABCDEF0123456789",
            "X-B3-SpanId": "0123456789ABCDEF",
        }

        assert resolve_trace_context(headers) == TraceContext("abcdef0123456789", "0123456789abcdef")

    def test_zero_span_id_falls_back_to_request_id(self):
        headers = {
            "traceparent": "00-4bf92f3577b34da6a3ce929d0e0e4736-0000000000000000-01",
            "x-request-id": "Req-42",
        }

        assert resolve_trace_context(headers) == TraceContext("req-42", UNKNOWN)

    def test_blank_b3_trace_id_uses_request_id(self):
        headers = {"x-b3-traceid": "   ", "x-request-id": "req-1", "x-b3-spanid": "abc"}

        assert resolve_trace_context(headers) == TraceContext("req-1", "abc")

    def test_no_headers_is_unknown(self):
        assert resolve_trace_context({}) == TraceContext(UNKNOWN, UNKNOWN)

    def test_starlette_headers(self):
        headers = Headers({"Traceparent": TRACEPARENT})

        assert resolve_trace_context(headers).trace_id == "4bf92f3577b34da6a3ce929d0e0e4736"


class TestRequestLoggingMiddleware:
    """Test RequestLoggingMiddleware functionality"""

    @pytest.mark.asyncio
    async def test_logger_bound_with_trace_context(self):
        # Arrange
        base_logger = Mock()
        middleware = RequestLoggingMiddleware(Mock(), logger=base_logger)

        class MockRequest:
            def __init__(self):
                self.headers = Headers({"traceparent": TRACEPARENT})
                self.method = "POST"
                self.url = Mock(path="/publish")
                self.state = Mock()

        request = MockRequest()
        call_next_response = Mock()

        async def call_next(req):
            return call_next_response

        # Act
        response = await middleware.dispatch(request, call_next)

        # Assert
        assert response is call_next_response
        base_logger.bind.assert_called_once_with(
            traceId="4bf92f3577b34da6a3ce929d0e0e4736",
            spanId="00f067aa0ba902b7",
            method="POST",
            path="/publish",
        )
        assert request.state.logger is base_logger.bind.return_value
        assert request.state.trace_context.span_id == "00f067aa0ba902b7"

    def test_get_request_logger_falls_back_to_root_logger(self):
        request = Mock()
        request.state = Mock(spec=[])

        assert get_request_logger(request) is root_logger
