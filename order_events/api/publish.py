"""
Producer endpoint: POST /publish
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from order_events.api.operational import get_metrics
from order_events.core.errors import DeliveryError, ValidationError
from order_events.core.logger import StructuredLogger
from order_events.core.metrics import ProducerMetrics
from order_events.middleware.trace_context import get_request_logger
from order_events.models.events import PublishOrderRequest
from order_events.services.publisher import OrderPublisher

router = APIRouter(tags=["producer"])


def get_publisher(request: Request) -> OrderPublisher:
    return request.app.state.publisher


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/publish", status_code=202)
async def publish_order(
    request: Request,
    metrics: ProducerMetrics = Depends(get_metrics),
    publisher: OrderPublisher = Depends(get_publisher),
    logger: StructuredLogger = Depends(get_request_logger),
):
    """Validate a publish request and forward it to the sidecar as OrderCreatedV1"""
    metrics.requests.inc()

    try:
        publish_request = PublishOrderRequest.model_validate_json(await request.body(), strict=True)
    except PydanticValidationError as e:
        metrics.errors.inc()
        logger.warning("Invalid publish request payload", metadata={"errorCount": e.error_count()})
        return _error(400, "invalid request payload")

    try:
        publish_request.validate_for_publish()
    except ValidationError as e:
        metrics.errors.inc()
        logger.warning(f"Publish request rejected: {e.message}", metadata={"orderId": publish_request.id})
        return _error(400, e.message)

    try:
        event = await publisher.publish(publish_request, logger=logger)
    except DeliveryError as e:
        metrics.errors.inc()
        logger.error(
            "Publish failed",
            error=e,
            metadata={"orderId": publish_request.id, **e.details},
        )
        return _error(502, "failed to publish event")

    metrics.published.inc()
    logger.info(
        "Published order event",
        metadata={
            "orderId": event.id,
            "eventVersion": event.event_version,
            "url": publisher.publish_url,
        },
    )
    return JSONResponse(status_code=202, content={"status": "accepted", "orderId": event.id})
