"""Tests for order event models"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from order_events.core.errors import InvalidRequestError
from order_events.models.events import (
    EVENT_VERSION,
    CloudEventEnvelope,
    DaprSubscription,
    OrderCreatedV1,
    PublishOrderRequest,
)


class TestOrderCreatedV1:
    """Test OrderCreatedV1 model"""

    def test_wire_form_uses_camel_case_version(self):
        event = OrderCreatedV1(id="ORD-1", amount=10.5, event_version="v1")

        assert event.to_wire() == {"id": "ORD-1", "amount": 10.5, "eventVersion": "v1"}

    def test_accepts_wire_alias(self):
        event = OrderCreatedV1.model_validate({"id": "ORD-1", "amount": 1, "eventVersion": "v3"})

        assert event.event_version == "v3"

    def test_missing_fields_decode_to_zero_values(self):
        event = OrderCreatedV1.model_validate({})

        assert event.id == ""
        assert event.amount == 0
        assert event.event_version == ""

    def test_with_default_version_fills_blank(self):
        event = OrderCreatedV1(id="ORD-1", amount=1, event_version="  ")

        assert event.with_default_version().event_version == EVENT_VERSION

    def test_with_default_version_keeps_existing(self):
        event = OrderCreatedV1(id="ORD-1", amount=1, event_version="v2")

        assert event.with_default_version() is event


class TestPublishOrderRequest:
    """Test PublishOrderRequest validation"""

    def test_valid_request(self):
        PublishOrderRequest(id="ORD-1", amount=10).validate_for_publish()

    @pytest.mark.parametrize(
        "request_data,message",
        [
            ({"id": "", "amount": 10}, "id must not be blank"),
            ({"id": "  ", "amount": 10}, "id must not be blank"),
            ({"amount": 10}, "id must not be blank"),
            ({"id": "ORD-1", "amount": 0}, "amount must be greater than zero"),
            ({"id": "ORD-1", "amount": -5}, "amount must be greater than zero"),
            ({"id": "ORD-1"}, "amount must be greater than zero"),
        ],
    )
    def test_invalid_request(self, request_data, message):
        request = PublishOrderRequest(**request_data)

        with pytest.raises(InvalidRequestError) as exc_info:
            request.validate_for_publish()

        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount_is_rejected(self, amount):
        with pytest.raises(PydanticValidationError):
            PublishOrderRequest(id="ORD-1", amount=amount)

    def test_null_fields_read_as_zero_values(self):
        request = PublishOrderRequest.model_validate_json(b'{"id": null, "amount": null}', strict=True)

        assert request == PublishOrderRequest()
        with pytest.raises(InvalidRequestError) as exc_info:
            request.validate_for_publish()
        assert exc_info.value.message == "id must not be blank"

    def test_to_event_stamps_version(self):
        event = PublishOrderRequest(id="ORD-1", amount=10).to_event()

        assert event == OrderCreatedV1(id="ORD-1", amount=10, event_version="v1")


class TestCloudEventEnvelope:
    def test_envelope_with_data_is_wrapped(self):
        envelope = CloudEventEnvelope.model_validate({"data": {"id": "ORD-1"}, "type": "order"})

        assert envelope.is_wrapped
        assert envelope.type == "order"

    def test_envelope_without_data_is_raw(self):
        envelope = CloudEventEnvelope.model_validate({"id": "ORD-1", "amount": 10})

        assert not envelope.is_wrapped


class TestDaprSubscription:
    def test_subscription_is_immutable(self):
        subscription = DaprSubscription(pubsubname="order-pubsub", topic="orders", route="/orders")

        with pytest.raises(PydanticValidationError):
            subscription.route = "/other"

    def test_subscription_wire_form(self):
        subscription = DaprSubscription(pubsubname="order-pubsub", topic="orders", route="/orders")

        assert subscription.model_dump() == {
            "pubsubname": "order-pubsub",
            "topic": "orders",
            "route": "/orders",
        }
