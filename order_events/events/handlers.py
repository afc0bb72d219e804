"""
Consumer-side handling of parsed order events
"""

from typing import Protocol

from order_events.core.logger import StructuredLogger
from order_events.core.telemetry import consumer_span
from order_events.models.events import OrderCreatedV1


class OrderEventHandler(Protocol):
    async def handle(self, event: OrderCreatedV1, logger: StructuredLogger) -> None:
        ...


class LoggingOrderEventHandler:
    """Records each received order event in an orders.consume span and the log"""

    async def handle(self, event: OrderCreatedV1, logger: StructuredLogger) -> None:
        with consumer_span(
            "orders.consume",
            {"order.id": event.id, "order.event_version": event.event_version},
        ):
            logger.info(
                f"Received order event {event.id}",
                metadata={
                    "orderId": event.id,
                    "amount": event.amount,
                    "eventVersion": event.event_version,
                },
            )
