"""
Order event models shared by the producer and the consumer
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from order_events.core.errors import InvalidRequestError

EVENT_VERSION = "v1"


class OrderCreatedV1(BaseModel):
    """Versioned "order created" event as it travels through the broker"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)

    # Zero values for missing or null fields, so a missing id surfaces as a blank id
    id: str = ""
    amount: float = 0.0
    event_version: str = Field(default="", alias="eventVersion")

    @field_validator("id", "event_version", mode="before")
    @classmethod
    def null_string_as_blank(cls, value):
        return "" if value is None else value

    @field_validator("amount", mode="before")
    @classmethod
    def null_amount_as_zero(cls, value):
        return 0.0 if value is None else value

    def with_default_version(self) -> "OrderCreatedV1":
        if self.event_version.strip():
            return self
        return self.model_copy(update={"event_version": EVENT_VERSION})

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class PublishOrderRequest(BaseModel):
    """Body of POST /publish"""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: str = ""
    amount: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def null_id_as_blank(cls, value):
        return "" if value is None else value

    @field_validator("amount", mode="before")
    @classmethod
    def null_amount_as_zero(cls, value):
        return 0.0 if value is None else value

    def validate_for_publish(self) -> None:
        """Raise InvalidRequestError unless the request may be published"""
        if not self.id.strip():
            raise InvalidRequestError("id must not be blank")
        if not self.amount > 0:
            raise InvalidRequestError("amount must be greater than zero")

    def to_event(self) -> OrderCreatedV1:
        return OrderCreatedV1(id=self.id, amount=self.amount, event_version=EVENT_VERSION)


class CloudEventEnvelope(BaseModel):
    """
    Generic CloudEvent wrapper added by the sidecar.

    Only ``data`` decides the wire shape; the remaining attributes are kept
    for logging and never affect parsing.
    """

    model_config = ConfigDict(extra="ignore")

    data: Optional[Any] = None
    id: Optional[Any] = None
    source: Optional[Any] = None
    specversion: Optional[Any] = None
    type: Optional[Any] = None
    datacontenttype: Optional[Any] = None

    @property
    def is_wrapped(self) -> bool:
        return self.data is not None


class DaprSubscription(BaseModel):
    """Subscription advertised to the sidecar on GET /dapr/subscribe"""

    model_config = ConfigDict(frozen=True)

    pubsubname: str
    topic: str
    route: str
