"""
Dapr Pub/Sub subscription endpoints
Advertises the order subscription and receives webhook deliveries
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.requests import ClientDisconnect

from order_events.api.operational import get_metrics
from order_events.core.errors import ErrorResponse
from order_events.core.logger import StructuredLogger
from order_events.core.metrics import ConsumerMetrics
from order_events.events.handlers import OrderEventHandler
from order_events.events.parser import parse_order_event
from order_events.middleware.trace_context import get_request_logger
from order_events.models.events import DaprSubscription


def get_event_handler(request: Request) -> OrderEventHandler:
    return request.app.state.event_handler


def build_router(subscription: DaprSubscription) -> APIRouter:
    """Router for GET /dapr/subscribe and POST on the subscription route"""
    router = APIRouter(tags=["dapr-pubsub"])

    @router.get("/dapr/subscribe")
    async def get_subscriptions(logger: StructuredLogger = Depends(get_request_logger)):
        """
        Dapr calls this endpoint to get the list of subscriptions.
        """
        logger.debug(
            "Serving Dapr subscription config",
            metadata=subscription.model_dump(),
        )
        return [subscription.model_dump()]

    async def consume_order_event(
        request: Request,
        metrics: ConsumerMetrics = Depends(get_metrics),
        handler: OrderEventHandler = Depends(get_event_handler),
        logger: StructuredLogger = Depends(get_request_logger),
    ):
        """
        Handle an order.created delivery from Dapr pub/sub.
        200 acknowledges the delivery, 400 rejects it.
        """
        metrics.requests.inc()

        try:
            payload = await request.body()
        except ClientDisconnect:
            metrics.errors.inc()
            logger.warning("Failed to read event payload", metadata={"route": subscription.route})
            return JSONResponse(status_code=400, content={"error": "failed to read event payload"})

        logger.debug("Received event", metadata={"route": subscription.route, "payloadSize": len(payload)})

        try:
            event = parse_order_event(payload)
        except ErrorResponse as e:
            # Payload size only, the payload itself may be sensitive
            metrics.errors.inc()
            logger.warning(
                f"Failed to parse event payload: {e.message}",
                metadata={
                    "route": subscription.route,
                    "payloadSize": len(payload),
                    "errorType": type(e).__name__,
                },
            )
            return JSONResponse(status_code=400, content={"error": "invalid event payload"})

        try:
            await handler.handle(event, logger)
        except Exception as e:
            metrics.errors.inc()
            logger.error(
                "Failed to process event",
                error=e,
                metadata={"route": subscription.route, "orderId": event.id},
            )
            return JSONResponse(status_code=500, content={"error": "failed to process event"})

        metrics.consumed.inc()
        logger.info(
            "Consumed order event",
            metadata={
                "route": subscription.route,
                "orderId": event.id,
                "eventVersion": event.event_version,
            },
        )
        return Response(status_code=200)

    router.add_api_route(subscription.route, consume_order_event, methods=["POST"])
    return router
