"""
Order event publisher
Publishes order.created events to the Dapr sidecar over HTTP
"""

import json
from typing import Optional

import httpx

from order_events.core.errors import DeliveryError, EncodeError, RejectedError
from order_events.core.logger import StructuredLogger, logger as root_logger
from order_events.models.events import OrderCreatedV1, PublishOrderRequest


class OrderPublisher:
    """
    Publisher for order events via the Dapr publish endpoint.

    Exactly one delivery attempt is made per call; callers wanting retries
    wrap ``publish`` themselves.
    """

    def __init__(
        self,
        publish_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.publish_url = publish_url
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def encode(event: OrderCreatedV1) -> bytes:
        try:
            return json.dumps(event.to_wire(), allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodeError(f"encode event: {e}", details={"orderId": event.id}) from e

    async def publish(self, request: PublishOrderRequest, logger: StructuredLogger = None) -> OrderCreatedV1:
        """
        Publish an already validated request as an OrderCreatedV1 event

        Returns:
            OrderCreatedV1: the event that the sidecar accepted

        Raises:
            EncodeError: the event could not be serialized
            DeliveryError: transport failure or timeout
            RejectedError: the sidecar answered outside 200-299
        """
        logger = logger or root_logger
        event = request.to_event()

        try:
            body = self.encode(event)
        except EncodeError as e:
            logger.error("Failed to encode order event", error=e, metadata={"orderId": event.id})
            raise

        logger.debug(
            "Publishing order event",
            metadata={"orderId": event.id, "url": self.publish_url},
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.publish_url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            logger.error(
                "Publish request failed",
                error=e,
                metadata={"orderId": event.id, "url": self.publish_url},
            )
            raise DeliveryError(f"publish request failed: {e}", details={"orderId": event.id}) from e

        if not 200 <= response.status_code <= 299:
            logger.warning(
                "Publish endpoint returned non-2xx status",
                metadata={"orderId": event.id, "statusCode": response.status_code},
            )
            raise RejectedError(response.status_code)

        logger.debug(
            "Publish request succeeded",
            metadata={"orderId": event.id, "statusCode": response.status_code},
        )
        return event
