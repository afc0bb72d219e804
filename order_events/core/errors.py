"""
Error taxonomy and handlers for the order events services
"""

from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from order_events.core.logger import logger


class ErrorResponse(Exception):
    """Base exception for application errors"""

    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None, details: dict = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(ErrorResponse):
    """Client-caused validation failure, never retried"""


class InvalidRequestError(ValidationError):
    """Publish request rejected before any outbound call"""


class InvalidEventError(ValidationError):
    """Event decoded fine but violates the event invariants"""


class MalformedPayloadError(ErrorResponse):
    """Payload is neither an envelope-wrapped nor a raw order event"""


class DeliveryError(ErrorResponse):
    """Event could not be handed to the sidecar"""

    status_code = 502


class RejectedError(DeliveryError):
    """Sidecar answered with a non-2xx status"""

    def __init__(self, upstream_status: int, message: Optional[str] = None):
        self.upstream_status = upstream_status
        super().__init__(
            message or f"publish endpoint returned status {upstream_status}",
            details={"upstreamStatus": upstream_status},
        )


class EncodeError(DeliveryError):
    """Event could not be serialized; fails the single request only"""


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for ErrorResponse exceptions that escaped a route"""
    logger.error(
        f"Error: {exc.message}",
        metadata={
            "event": "error_response",
            "status_code": exc.status_code,
            "method": request.method,
            "path": request.url.path,
            **exc.details,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "method": request.method,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handler for FastAPI request validation errors"""
    logger.warning(
        "Request validation error",
        metadata={"event": "validation_error", "errors": exc.errors()},
    )
    return JSONResponse(status_code=400, content={"error": "invalid request payload"})


def register_error_handlers(app) -> None:
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
