"""
Models module initialization
"""

from .events import (
    EVENT_VERSION,
    CloudEventEnvelope,
    DaprSubscription,
    OrderCreatedV1,
    PublishOrderRequest,
)

__all__ = [
    "EVENT_VERSION",
    "CloudEventEnvelope",
    "DaprSubscription",
    "OrderCreatedV1",
    "PublishOrderRequest",
]
