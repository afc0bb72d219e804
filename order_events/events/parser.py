"""
Order event parser for webhook deliveries

Deliveries arrive either wrapped in a CloudEvent envelope (``{"data": {...}}``)
or as the raw event. The wrapped shape is tried first; when its inner
``data`` does not decode, the whole payload is retried as a raw event.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from order_events.core.errors import InvalidEventError, MalformedPayloadError
from order_events.models.events import CloudEventEnvelope, OrderCreatedV1


def _decode_envelope(payload: bytes) -> Optional[CloudEventEnvelope]:
    try:
        return CloudEventEnvelope.model_validate_json(payload)
    except PydanticValidationError:
        return None


def _decode_wrapped(envelope: CloudEventEnvelope) -> Optional[OrderCreatedV1]:
    try:
        return OrderCreatedV1.model_validate(envelope.data, strict=True)
    except PydanticValidationError:
        return None


def _decode_raw(payload: bytes) -> OrderCreatedV1:
    try:
        return OrderCreatedV1.model_validate_json(payload, strict=True)
    except PydanticValidationError as e:
        raise MalformedPayloadError(
            "payload is neither a CloudEvent nor an OrderCreatedV1 event",
            details={"payloadSize": len(payload), "errorCount": e.error_count()},
        ) from e


def _normalize(event: OrderCreatedV1) -> OrderCreatedV1:
    event = event.with_default_version()
    if not event.id.strip():
        raise InvalidEventError("event id must not be blank")
    return event


def parse_order_event(payload: bytes) -> OrderCreatedV1:
    """
    Turn a delivery payload into a validated, version-normalized event.

    Raises:
        MalformedPayloadError: neither the wrapped nor the raw shape decodes
        InvalidEventError: the decoded event has a blank id
    """
    envelope = _decode_envelope(payload)
    if envelope is not None and envelope.is_wrapped:
        event = _decode_wrapped(envelope)
        if event is not None:
            return _normalize(event)

    return _normalize(_decode_raw(payload))
